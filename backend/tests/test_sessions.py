from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from conftest import TEST_PIN
from gate import AccessGate
from sessions import SessionRegistry
from workflow import SubmissionWorkflow


class Ticker:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_registry(store, day_clock, **kwargs):
    return SessionRegistry(lambda: SubmissionWorkflow(AccessGate(TEST_PIN), store, day_clock), **kwargs)


def test_existing_session_is_reused(store, clock):
    registry = make_registry(store, clock)
    session_id, workflow = registry.get_or_create(None)

    assert registry.get_or_create(session_id) == (session_id, workflow)
    assert len(registry) == 1
    assert store.calls == [("query", clock.today())]


def test_unknown_session_id_starts_new_session(store, clock):
    registry = make_registry(store, clock)
    session_id, _ = registry.get_or_create("not-a-session")
    assert session_id != "not-a-session"
    assert len(registry) == 1


def test_least_recently_used_session_is_evicted(store, clock):
    registry = make_registry(store, clock, max_sessions=2)
    first, _ = registry.get_or_create(None)
    second, _ = registry.get_or_create(None)
    registry.get_or_create(first)

    registry.get_or_create(None)

    assert len(registry) == 2
    assert registry.get_or_create(first)[0] == first
    assert registry.get_or_create(second)[0] != second


def test_idle_sessions_expire(store, clock):
    ticker = Ticker()
    registry = make_registry(store, clock, ttl=60, clock=ticker)
    idle, _ = registry.get_or_create(None)
    ticker.now = 30
    active, _ = registry.get_or_create(None)

    ticker.now = 70
    assert registry.get_or_create(active)[0] == active
    assert len(registry) == 1
    assert registry.get_or_create(idle)[0] != idle


def test_store_read_happens_outside_the_lock(clock):
    """Test that a slow store read does not hold up other sessions."""
    registry = None
    lock_held = []

    class LockCheckingStore:
        def query(self, day):
            lock_held.append(registry._lock.locked())
            return []

        def upsert(self, response):
            pass

    registry = make_registry(LockCheckingStore(), clock)
    registry.get_or_create(None)
    assert lock_held == [False]


def test_cookieless_requests_stay_bounded(store, clock):
    """Test that clients dropping the session cookie cannot grow the registry forever."""
    app = create_app(Settings(pin=TEST_PIN, max_sessions=20), store=store, clock=clock)
    with TestClient(app) as client:
        for _ in range(200):
            client.cookies.clear()
            assert client.get("/session").status_code == 200

    assert len(app.state.registry) == 20

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from clock import FixedClock
from db import create_db_and_tables
from errors import RemotePersistenceFailure, RemoteReadFailure
from gate import AccessGate
from workflow import SubmissionWorkflow

TEST_PIN = "110925"
TEST_DAY = "2024-01-15"


class RecordingStore:
    """Fake store keyed by (day, name) that records every call."""

    def __init__(self, fail_writes: bool = False, fail_reads: bool = False):
        self.records = {}
        self.calls = []
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads

    def query(self, day):
        self.calls.append(("query", day))
        if self.fail_reads:
            raise RemoteReadFailure("store unavailable")
        return [r for (d, _), r in self.records.items() if d == day]

    def upsert(self, response):
        self.calls.append(("upsert", response))
        if self.fail_writes:
            raise RemotePersistenceFailure("store unavailable")
        self.records[(response.day, response.name)] = response


@pytest.fixture
def clock():
    return FixedClock(TEST_DAY)


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def workflow(store, clock):
    return SubmissionWorkflow(AccessGate(TEST_PIN), store, clock)


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()

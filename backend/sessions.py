import logging
import threading
import time
import uuid
from collections import OrderedDict
from typing import Callable

from workflow import SubmissionWorkflow

logger = logging.getLogger(__name__)

SESSION_COOKIE = "lunch_session"


class SessionRegistry:
    """In-memory map of session ids to their workflows.

    Bounded two ways: sessions idle for longer than `ttl` seconds are dropped,
    and once `max_sessions` is reached the least recently used one is evicted.
    """

    def __init__(
        self,
        factory: Callable[[], SubmissionWorkflow],
        max_sessions: int = 500,
        ttl: float = 8 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.factory = factory
        self.max_sessions = max_sessions
        self.ttl = ttl
        self.clock = clock
        # session id -> (workflow, last seen), oldest first
        self._sessions: OrderedDict[str, tuple[SubmissionWorkflow, float]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_create(self, session_id: str | None) -> tuple[str, SubmissionWorkflow]:
        now = self.clock()
        with self._lock:
            self._expire(now)
            if session_id and session_id in self._sessions:
                workflow, _ = self._sessions[session_id]
                self._sessions[session_id] = (workflow, now)
                self._sessions.move_to_end(session_id)
                return session_id, workflow

        # Today's responses are read once, when the session starts.
        # The store read happens outside the lock so a slow store only delays this caller.
        workflow = self.factory()
        workflow.load()

        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = (workflow, now)
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Evicted session {evicted[:8]}, registry full")

        logger.info(f"Started session {session_id[:8]} with {len(workflow.responses)} responses")
        return session_id, workflow

    def _expire(self, now: float):
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if now - last_seen < self.ttl:
                break
            del self._sessions[session_id]
            logger.info(f"Expired idle session {session_id[:8]}")

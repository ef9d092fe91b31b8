"""Per-session form state and the submit flow.

Submitting is a two-phase operation: the new response is committed to the
local display list first, then handed to the store as a best-effort remote
sync. The outcome of the sync is recorded in `last_sync` but never changes the
local list or the user-visible error, so the form keeps working when the store
is unreachable.
"""
import logging
from typing import Callable

from aggregator import summarize
from clock import CalendarClock
from errors import InvalidSecret, LunchPollError, MissingCredentials
from gate import AccessGate
from intervals import IntervalListEditor
from schemas import DaySummary, Interval, LunchResponse, SessionState, SyncResult
from store import ResponseStore

logger = logging.getLogger(__name__)

ANSWERS = ("yes", "no")

Dispatch = Callable[..., None]


def run_inline(func: Callable, *args) -> None:
    func(*args)


class SubmissionWorkflow:
    def __init__(self, gate: AccessGate, store: ResponseStore, clock: CalendarClock):
        self.gate = gate
        self.store = store
        self.clock = clock

        self.authorized = False
        self.name = ""
        self.pin = ""
        self.answer: str | None = None
        self.intervals = IntervalListEditor()
        self.error = ""
        self.responses: list[LunchResponse] = []
        self.last_sync: SyncResult | None = None

    def load(self) -> list[LunchResponse]:
        """Fetch today's responses once. A failed read leaves the list empty."""
        day = self.clock.today()
        try:
            self.responses = list(self.store.query(day))
        except LunchPollError as e:
            logger.warning(f"Could not load responses for {day}: {e}")
            self.responses = []
        return self.responses

    # Form fields

    def set_name(self, name: str):
        self.name = name

    def set_pin(self, pin: str):
        self.pin = pin

    def choose_answer(self, answer: str | None):
        if answer is not None and answer not in ANSWERS:
            raise ValueError(f"Answer must be one of: {ANSWERS}")
        self.answer = answer

    def add_interval(self) -> list[Interval]:
        return self.intervals.append()

    def set_interval_field(self, index: int, field: str, value: str) -> list[Interval]:
        return self.intervals.set_field(index, field, value)

    # Authentication

    def check_credentials(self):
        """Raise MissingCredentials or InvalidSecret unless name and PIN are acceptable."""
        if not self.name or not self.pin:
            raise MissingCredentials()
        if not self.gate.verify(self.pin):
            raise InvalidSecret()

    def confirm_pin(self) -> bool:
        try:
            self.check_credentials()
        except LunchPollError as e:
            logger.info(f"PIN confirmation rejected: {e.message}")
            self.error = e.message
            return False

        self.authorized = True
        self.error = ""
        return True

    # Submission

    def submit(self, dispatch: Dispatch | None = None) -> LunchResponse | None:
        """Validate, commit locally, schedule the remote upsert and reset the form.

        The PIN is checked on every submit, even after a successful confirmation.
        Returns the new response, or None when validation failed (see `error`).
        """
        try:
            self.check_credentials()
        except LunchPollError as e:
            logger.info(f"Submit rejected: {e.message}")
            self.error = e.message
            return None

        self.authorized = True

        if self.answer is None:
            # Tolerated: the record is stored with no answer and shown in neither group
            logger.warning(f"Submitting response for {self.name} without an answer")

        response = LunchResponse(
            day=self.clock.today(),
            name=self.name,
            answer=self.answer,
            intervals=self.intervals.to_persistable(),
            inserted_at=self.clock.now(),
        )

        self.responses.append(response)
        logger.info(f"Submitted response for {response.name} on {response.day}: {response.answer}")

        (dispatch or run_inline)(self.sync, response)

        self.reset_form()
        return response

    def sync(self, response: LunchResponse) -> SyncResult:
        """Best-effort remote upsert. Failures are logged and recorded, never raised."""
        try:
            self.store.upsert(response)
            result = SyncResult(ok=True)
        except LunchPollError as e:
            logger.error(f"Failed to persist response for {response.name} on {response.day}: {e}")
            result = SyncResult(ok=False, error=str(e))
        self.last_sync = result
        return result

    def reset_form(self):
        self.answer = None
        self.intervals.reset()
        self.name = ""
        self.pin = ""
        self.error = ""

    # Views

    def summary(self) -> DaySummary:
        return summarize(self.clock.today(), self.responses)

    def state(self) -> SessionState:
        return SessionState(
            authorized=self.authorized,
            name=self.name,
            answer=self.answer,
            intervals=self.intervals.items,
            error=self.error,
            summary=self.summary(),
            last_sync=self.last_sync,
        )

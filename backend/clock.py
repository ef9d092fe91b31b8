"""Day key derivation in a fixed timezone."""
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class CalendarClock:
    """Current calendar date (YYYY-MM-DD) in a named IANA timezone."""

    def __init__(self, timezone: str = "Europe/Ljubljana"):
        try:
            self.tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Invalid timezone identifier: {timezone!r}") from e

    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> str:
        return self.now().astimezone(self.tz).strftime("%Y-%m-%d")


class FixedClock(CalendarClock):
    """Clock pinned to a given day, for tests and seeding."""

    def __init__(self, day: str, instant: datetime | None = None):
        # Validate the day format up front
        datetime.strptime(day, "%Y-%m-%d")
        self.day = day
        self.instant = instant or datetime(2024, 1, 15, 11, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.instant

    def today(self) -> str:
        return self.day

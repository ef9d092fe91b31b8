import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator

Answer = Literal["yes", "no"]

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Interval(BaseModel):
    start: str = ""
    end: str = ""


class LunchResponse(BaseModel):
    """A submitted answer for one person on one day. (day, name) is the natural key."""

    day: str  # YYYY-MM-DD format
    name: str
    answer: Answer | None = None
    intervals: list[Interval] = []
    inserted_at: datetime


class SyncResult(BaseModel):
    ok: bool
    error: str | None = None


class YesRow(BaseModel):
    name: str
    intervals: list[str] = []


class NoRow(BaseModel):
    name: str


class DaySummary(BaseModel):
    day: str
    yes: list[YesRow]
    no: list[NoRow]


class SessionState(BaseModel):
    authorized: bool
    name: str
    answer: Answer | None = None
    intervals: list[Interval]
    error: str
    summary: DaySummary
    last_sync: SyncResult | None = None


class PinRequest(BaseModel):
    name: str = ""
    pin: str = ""


class FormUpdate(BaseModel):
    name: str | None = None
    pin: str | None = None
    answer: Answer | None = None
    clear_answer: bool = False


class IntervalUpdate(BaseModel):
    field: Literal["start", "end"]
    value: str

    @field_validator("value")
    @classmethod
    def validate_value(cls, v):
        # Empty clears the field; otherwise a time-of-day as sent by <input type="time">
        if v and not _TIME_RE.match(v):
            raise ValueError("Time must be empty or in HH:MM format")
        return v


class IntervalsResponse(BaseModel):
    intervals: list[Interval]


class SubmitResponse(BaseModel):
    ok: bool
    response: LunchResponse

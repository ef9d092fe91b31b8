from datetime import UTC, datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel, UniqueConstraint


class Response(SQLModel, table=True):
    __tablename__ = "responses"
    __table_args__ = (UniqueConstraint("day", "name", name="uniq_responses_day_name"),)

    id: int | None = Field(default=None, primary_key=True)
    day: str = Field(index=True)  # YYYY-MM-DD format
    name: str = Field(index=True)  # As entered, no normalization
    answer: str | None = Field(default=None)  # 'yes', 'no', or None when submitted unset
    intervals: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    inserted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

"""Persistence of lunch responses, keyed by (day, name)."""
import logging
from typing import Protocol

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from errors import RemotePersistenceFailure, RemoteReadFailure
from models import Response
from schemas import Interval, LunchResponse

logger = logging.getLogger(__name__)


class ResponseStore(Protocol):
    def query(self, day: str) -> list[LunchResponse]: ...

    def upsert(self, response: LunchResponse) -> None: ...


def to_record(row: Response) -> LunchResponse:
    return LunchResponse(
        day=row.day,
        name=row.name,
        answer=row.answer,
        intervals=[Interval(**item) for item in row.intervals or []],
        inserted_at=row.inserted_at,
    )


class LocalOnlyStore:
    """Store used when no database is configured. Reads are empty and writes are skipped."""

    def query(self, day: str) -> list[LunchResponse]:
        return []

    def upsert(self, response: LunchResponse) -> None:
        logger.debug(f"Local-only mode, not persisting response for {response.name} on {response.day}")


class SqlResponseStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    @property
    def is_postgres(self) -> bool:
        return "postgresql" in str(self.engine.url).lower()

    def query(self, day: str) -> list[LunchResponse]:
        """All responses for `day`, in insertion order."""
        try:
            with Session(self.engine) as session:
                rows = session.exec(
                    select(Response).where(Response.day == day).order_by(Response.id)
                ).all()
                records = [to_record(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error reading responses for {day}: {str(e)}")
            raise RemoteReadFailure(str(e)) from e

        logger.info(f"Found {len(records)} responses for {day}")
        return records

    def upsert(self, response: LunchResponse) -> None:
        """Insert or replace the response stored under (day, name) in one statement."""
        insert = pg_insert if self.is_postgres else sqlite_insert
        stmt = insert(Response.__table__).values(
            day=response.day,
            name=response.name,
            answer=response.answer,
            intervals=[interval.model_dump() for interval in response.intervals],
            inserted_at=response.inserted_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["day", "name"],
            set_={
                "answer": stmt.excluded.answer,
                "intervals": stmt.excluded.intervals,
                "inserted_at": stmt.excluded.inserted_at,
            },
        )

        with Session(self.engine) as session:
            try:
                session.execute(stmt)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Error in upsert for {response.name} on {response.day}: {str(e)}")
                raise RemotePersistenceFailure(str(e)) from e

        logger.info(f"Upserted response for {response.name} on {response.day}")

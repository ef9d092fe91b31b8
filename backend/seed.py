from clock import CalendarClock
from config import Settings
from db import build_engine, create_db_and_tables
from schemas import Interval, LunchResponse
from store import SqlResponseStore


def seed_database(store: SqlResponseStore, clock: CalendarClock):
    """Seed today's responses with sample data."""
    day = clock.today()
    if store.query(day):
        print(f"Responses for {day} already exist, skipping seed.")
        return

    now = clock.now()
    sample_responses = [
        LunchResponse(
            day=day,
            name="Ana",
            answer="yes",
            intervals=[Interval(start="11:30", end="12:30")],
            inserted_at=now,
        ),
        LunchResponse(
            day=day,
            name="Bojan",
            answer="yes",
            intervals=[
                Interval(start="12:00", end="12:45"),
                Interval(start="13:30", end="14:00"),
            ],
            inserted_at=now,
        ),
        LunchResponse(day=day, name="Cvetka", answer="no", inserted_at=now),
    ]

    for response in sample_responses:
        store.upsert(response)
    print(f"Seeded {day} with {len(sample_responses)} sample responses.")


if __name__ == "__main__":
    settings = Settings.from_env()
    engine = build_engine(settings)
    if engine is None:
        print("ERROR: DATABASE_URL environment variable not set")
        raise SystemExit(1)

    create_db_and_tables(engine)
    seed_database(SqlResponseStore(engine), CalendarClock(settings.timezone))

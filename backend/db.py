import logging

from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine

import models  # noqa: F401  registers the responses table
from config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine | None:
    """Create the store engine, or None when no store is configured (local-only mode)."""
    if settings.local_only:
        logger.info("DATABASE_URL not set; running in local-only mode")
        return None

    url = make_url(settings.database_url)
    if settings.database_key:
        url = url.set(password=settings.database_key)

    connect_args = {}
    if url.drivername.startswith("postgresql"):
        connect_args["connect_timeout"] = settings.store_timeout
    elif url.drivername.startswith("sqlite"):
        # Sync routes run in a thread pool
        connect_args["check_same_thread"] = False

    # Log database driver for observability
    logger.info(f"DB_URL_DRIVER={url.drivername}")
    return create_engine(url, echo=False, connect_args=connect_args)


def create_db_and_tables(engine: Engine):
    """Create tables if they don't exist. Safe to call multiple times."""
    SQLModel.metadata.create_all(engine)

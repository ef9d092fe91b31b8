import logging
import os

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_PIN = "110925"
DEFAULT_TIMEZONE = "Europe/Ljubljana"


class Settings(BaseModel):
    database_url: str | None = None
    database_key: str | None = None
    pin: str = DEFAULT_PIN
    timezone: str = DEFAULT_TIMEZONE
    store_timeout: int = 5
    max_sessions: int = 500
    session_ttl: int = 8 * 60 * 60
    env: str = "dev"

    @property
    def local_only(self) -> bool:
        return not self.database_url

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        database_url = os.getenv("DATABASE_URL") or None
        env = os.getenv("ENV", os.getenv("RENDER", "").lower() or "dev")

        # Render provides postgres:// but SQLAlchemy needs postgresql://
        if database_url and database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)

        if not database_url and (env in ("prod", "production") or os.getenv("RENDER")):
            logger.warning(
                "DATABASE_URL missing in production; responses will only be kept in memory"
            )

        return cls(
            database_url=database_url,
            database_key=os.getenv("DATABASE_KEY") or None,
            pin=os.getenv("LUNCH_PIN", DEFAULT_PIN),
            timezone=os.getenv("LUNCH_TIMEZONE", DEFAULT_TIMEZONE),
            store_timeout=os.getenv("STORE_TIMEOUT", "5"),
            max_sessions=os.getenv("MAX_SESSIONS", "500"),
            session_ttl=os.getenv("SESSION_TTL", str(8 * 60 * 60)),
            env=env,
        )

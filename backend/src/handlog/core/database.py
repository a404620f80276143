from __future__ import annotations

import logging
from typing import Iterator

from sqlalchemy import text
from sqlmodel import Session, SQLModel, create_engine

from .config import get_settings

logger = logging.getLogger(__name__)


def _sqlite_connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI in threaded servers.
        return {"check_same_thread": False}
    return {}


settings = get_settings()

engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    connect_args=_sqlite_connect_args(settings.database_url),
)


def init_db() -> None:
    # Import models so SQLModel sees the metadata.
    from handlog import models  # noqa: F401  (import for side effect)

    SQLModel.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session


def check_db_connection() -> bool:
    """Return True when a trivial query succeeds on the configured engine."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.warning("Database health check failed: %s", exc)
        return False

"""SQLModel engine and session management."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from weather_relay.core.errors import StorageError

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the pooled engine shared by every request of this process."""

    if database_url == "sqlite://" or (database_url.startswith("sqlite") and ":memory:" in database_url):
        # In-memory SQLite lives on a single connection.
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    # Register table metadata before create_all.
    import weather_relay.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def wait_for_database(engine: Engine, retries: int = 10, interval_seconds: float = 2.0) -> None:
    """Block until the database answers a ping, retrying ``retries`` times."""

    attempts = 0
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established after %d retries", attempts)
            return
        except SQLAlchemyError as exc:
            if attempts >= retries:
                logger.error("Database unreachable after %d attempts", attempts + 1)
                raise StorageError(f"database unreachable: {exc}") from exc
            attempts += 1
            logger.warning("Database ping attempt %d failed: %s", attempts, exc)
            time.sleep(interval_seconds)


@contextmanager
def get_session(engine: Engine) -> Iterator[Session]:
    """Get a database session as a context manager (for use with 'with' statement)."""

    session = Session(engine)
    try:
        yield session
    finally:
        session.close()


__all__ = ["build_engine", "init_db", "wait_for_database", "get_session"]

"""
Database Configuration

Async SQLAlchemy engine, session factory and the declarative base.
SQLite (via aiosqlite) is the default; any async SQLAlchemy URL works.

The engine is built from the settings handed to the application factory and
kept on app.state, so each app talks to the database its settings name.
"""

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from regdesk.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def init_engine(
    settings: Settings,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Create the engine and session factory for settings.database_url.

    Nothing connects until the first session is used.
    """
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    return engine, session_maker


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields a database session.

    The session is closed when the request finishes.
    """
    async with request.app.state.session_maker() as session:
        yield session


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(engine: AsyncEngine) -> None:
    """
    Create tables that do not exist yet.

    Call this on application startup.
    """
    # Import models so they register on Base.metadata
    from regdesk.modules.registrations import models  # noqa: F401

    _ensure_sqlite_directory(engine.url.render_as_string(hide_password=False))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def close_db(engine: AsyncEngine) -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()

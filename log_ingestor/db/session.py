# log_ingestor/db/session.py
"""
Database session and initialization utilities.

We use:
- SQLAlchemy async engine + AsyncSession
- SQLite via aiosqlite driver

Key points:
- `init_db()` creates tables and applies SQLite pragmas.
- `get_session_factory()` is a FastAPI dependency returning the session factory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from log_ingestor.core.config import settings
from log_ingestor.db.models import Base

logger = logging.getLogger(__name__)


# Keep echo=False to avoid logging SQL in normal use.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
)

# Session factory used by FastAPI dependencies and the SQL log store.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,  # rows stay readable after commit
    class_=AsyncSession,
)


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    database = parsed.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Initialize database schema and apply SQLite pragmas.

    Pragmas:
    - journal_mode=WAL: reads don't block the ingest writer
    - synchronous=NORMAL: durability vs speed balance
    """
    bind = bind or engine
    _ensure_sqlite_dir(str(bind.url))

    async with bind.begin() as conn:
        if bind.dialect.name == "sqlite":
            await conn.execute(text("PRAGMA journal_mode=WAL;"))
            await conn.execute(text("PRAGMA synchronous=NORMAL;"))

        # Create tables if they don't exist
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database ready (%s)", bind.url.render_as_string(hide_password=True))


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    FastAPI dependency that provides the session factory.

    Callers open a session only when they need one:
        async with session_factory() as session:
            ...
    """
    return AsyncSessionLocal

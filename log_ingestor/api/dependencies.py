# log_ingestor/api/dependencies.py
"""
FastAPI dependencies wiring routes to a log store and the query engine.

The store backend is picked by `settings.STORE_BACKEND`:
- sqlite: a SqlAlchemyLogStore over a session opened for this request only
- memory: the InMemoryLogStore kept on `app.state` since startup; no session is opened
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from log_ingestor.core.config import settings
from log_ingestor.db.session import get_session_factory
from log_ingestor.services.log_store import InMemoryLogStore, LogStore, SqlAlchemyLogStore
from log_ingestor.services.query_engine import LogQueryEngine


def _memory_store(request: Request) -> InMemoryLogStore:
    store = getattr(request.app.state, "memory_store", None)
    if store is None:
        store = request.app.state.memory_store = InMemoryLogStore()
    return store


async def get_log_store(
    request: Request,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[LogStore, None]:
    if settings.STORE_BACKEND == "memory":
        yield _memory_store(request)
        return

    async with session_factory() as session:
        yield SqlAlchemyLogStore(session)


def get_query_engine(store: LogStore = Depends(get_log_store)) -> LogQueryEngine:
    return LogQueryEngine(store)

# log_ingestor/services/log_store.py
"""
Log storage backends.

The query engine and ingestion service only see the `LogStore` protocol:

    put(record) -> record with id
    get(id)     -> record or None
    all()       -> every record, in insertion order

Two implementations:
- SqlAlchemyLogStore: durable, one AsyncSession per request.
- InMemoryLogStore: process-lifetime list, used for STORE_BACKEND=memory and tests.
"""

from __future__ import annotations

import itertools
import threading
from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from log_ingestor.db.models import LogEntry
from log_ingestor.schemas.logs import LogMetadata, LogRecord


class LogStore(Protocol):
    """Ordered collection of log records with create/read operations."""

    async def put(self, record: LogRecord) -> LogRecord: ...

    async def get(self, log_id: int) -> Optional[LogRecord]: ...

    async def all(self) -> List[LogRecord]: ...


class InMemoryLogStore:
    """Thread-safe in-memory log storage backed by a list."""

    def __init__(self) -> None:
        self._logs: List[LogRecord] = []
        self._by_id: dict[int, LogRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    async def put(self, record: LogRecord) -> LogRecord:
        """Assign the next id and append. Ids are never reused."""
        with self._lock:
            stored = record.model_copy(update={"id": next(self._ids)})
            self._logs.append(stored)
            self._by_id[stored.id] = stored
        return stored

    async def get(self, log_id: int) -> Optional[LogRecord]:
        with self._lock:
            return self._by_id.get(log_id)

    async def all(self) -> List[LogRecord]:
        """Snapshot of every record, oldest first."""
        with self._lock:
            return list(self._logs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)


def _to_record(row: LogEntry) -> LogRecord:
    return LogRecord(
        id=row.id,
        level=row.level,
        message=row.message,
        resource_id=row.resource_id,
        timestamp=row.timestamp,
        trace_id=row.trace_id,
        span_id=row.span_id,
        commit=row.commit,
        metadata=LogMetadata(parent_resource_id=row.parent_resource_id),
    )


class SqlAlchemyLogStore:
    """
    Log store over the `log_entries` table.

    Transactions are scoped to a single `put`; reads never write.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def put(self, record: LogRecord) -> LogRecord:
        row = LogEntry(
            level=record.level,
            message=record.message,
            resource_id=record.resource_id,
            timestamp=record.timestamp,
            trace_id=record.trace_id,
            span_id=record.span_id,
            commit=record.commit,
            parent_resource_id=record.metadata.parent_resource_id,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return _to_record(row)

    async def get(self, log_id: int) -> Optional[LogRecord]:
        row = await self.session.get(LogEntry, log_id)
        return _to_record(row) if row is not None else None

    async def all(self) -> List[LogRecord]:
        rows = (
            await self.session.execute(select(LogEntry).order_by(LogEntry.id))
        ).scalars().all()
        return [_to_record(row) for row in rows]

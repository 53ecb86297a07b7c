# log_ingestor/services/ingest_service.py
"""
Ingestion-side orchestration (request body -> stored record).

Flow:
1) Drop any caller-supplied timestamp and stamp the current UTC time
2) Hand the record to the store, which assigns the id
3) Return the stored record
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from log_ingestor.schemas.ingest import LogIngestRequest
from log_ingestor.schemas.logs import LogRecord
from log_ingestor.services.log_store import LogStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as naive UTC, the form timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def ingest_log(
    store: LogStore,
    payload: LogIngestRequest,
    *,
    clock: Clock = utc_now,
) -> LogRecord:
    """
    Persist one log record.

    The server is the only authority on ingestion time: `payload.timestamp`
    is never stored.
    """
    if payload.timestamp is not None:
        logger.debug("Discarding caller timestamp %s", payload.timestamp.isoformat())

    record = LogRecord(
        level=payload.level,
        message=payload.message,
        resource_id=payload.resource_id,
        timestamp=clock(),
        trace_id=payload.trace_id,
        span_id=payload.span_id,
        commit=payload.commit,
        metadata=payload.metadata,
    )
    stored = await store.put(record)
    logger.info("Ingested log %d (level=%s, resource=%s)", stored.id, stored.level, stored.resource_id)
    return stored

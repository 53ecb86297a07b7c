# log_ingestor/api/routes/ingest.py
"""
POST /logs/ingest

Accepts one log record as JSON and returns it as stored, with its assigned
id and server-side timestamp.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from log_ingestor.api.dependencies import get_log_store
from log_ingestor.schemas.ingest import LogIngestRequest
from log_ingestor.schemas.logs import LogRecord
from log_ingestor.services.ingest_service import ingest_log
from log_ingestor.services.log_store import LogStore

router = APIRouter(prefix="/logs")


@router.post("/ingest", response_model=LogRecord)
async def ingest(
    payload: LogIngestRequest,
    store: LogStore = Depends(get_log_store),
):
    """
    Example body:
      {"level": "error", "message": "Failed to connect to DB", "resourceId": "server-1234"}
    """
    return await ingest_log(store, payload)

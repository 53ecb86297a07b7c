# log_ingestor/api/routes/logs.py
"""
GET /logs and the /logs/search* family.

Browse and filter ingested log entries. Every endpoint is a thin mapping of
query parameters onto LogQueryEngine; the filtering rules live there.

Static paths are declared before `/logs/{log_id}` so they are not captured
by it.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from log_ingestor.api.dependencies import get_query_engine
from log_ingestor.schemas.logs import LogRecord
from log_ingestor.services.query_engine import FilterCriteria, LogQueryEngine

router = APIRouter(prefix="/logs")


@router.get("/search", response_model=List[LogRecord])
async def search_logs(
    level: Optional[str] = Query(default=None, description="Exact level"),
    message: Optional[str] = Query(default=None, description="Exact message"),
    resource_id: Optional[str] = Query(default=None, alias="resourceId", description="Exact resource id"),
    start_time: Optional[datetime] = Query(default=None, alias="startTime", description="Inclusive lower bound"),
    end_time: Optional[datetime] = Query(default=None, alias="endTime", description="Inclusive upper bound"),
    engine: LogQueryEngine = Depends(get_query_engine),
):
    """
    Exact-match search over level, message and resource. The time window is
    inclusive and only applied when both bounds are given.

    Example:
      /logs/search?level=error&resourceId=server-1234&startTime=2023-09-15T00:00:00Z
    """
    return await engine.search(
        level=level,
        message=message,
        resource_id=resource_id,
        start_time=start_time,
        end_time=end_time,
    )


@router.get("/searchByLevel", response_model=List[LogRecord])
async def search_logs_by_level(
    level: str = Query(..., description="Level, case-insensitive"),
    engine: LogQueryEngine = Depends(get_query_engine),
):
    """Fails with the not-found envelope when nothing matches."""
    return await engine.filter_by_level(level)


@router.get("/searchByDateRange", response_model=List[LogRecord])
async def search_logs_by_date_range(
    start_time: datetime = Query(..., alias="startTime", description="Exclusive lower bound"),
    end_time: datetime = Query(..., alias="endTime", description="Exclusive upper bound"),
    engine: LogQueryEngine = Depends(get_query_engine),
):
    """
    Example:
      /logs/searchByDateRange?startTime=2023-11-19T00:00:00Z&endTime=2023-11-20T00:00:00Z
    """
    return await engine.filter_by_date_range(start_time, end_time)


@router.get("/searchByRegex", response_model=List[LogRecord])
async def search_logs_by_regex(
    regex: str = Query(..., description="Pattern searched case-insensitively in the message"),
    engine: LogQueryEngine = Depends(get_query_engine),
):
    """
    Example:
      /logs/searchByRegex?regex=.*Failed.*
    """
    return await engine.filter_by_regex(regex)


# Both paths are kept for existing clients; they were always the same query.
@router.get("/searchByMultipleFilters", response_model=List[LogRecord])
@router.get("/searchByMultipleFiltersWithOptional", response_model=List[LogRecord])
async def search_logs_by_multiple_filters(
    level: Optional[str] = Query(default=None),
    message: Optional[str] = Query(default=None),
    resource_id: Optional[str] = Query(default=None, alias="resourceId"),
    start_time: Optional[datetime] = Query(default=None, alias="startTime"),
    end_time: Optional[datetime] = Query(default=None, alias="endTime"),
    regex: Optional[str] = Query(default=None),
    engine: LogQueryEngine = Depends(get_query_engine),
):
    """
    Full six-predicate AND filter. An empty result is returned as [].

    Example:
      /logs/searchByMultipleFilters?level=error&regex=Failed.*DB&endTime=2023-11-20T00:00:00Z
    """
    criteria = FilterCriteria(
        level=level,
        message=message,
        resource_id=resource_id,
        start_time=start_time,
        end_time=end_time,
        regex=regex,
    )
    return await engine.filter_all(criteria)


@router.get("/{log_id}", response_model=LogRecord)
async def get_log(
    log_id: int,
    engine: LogQueryEngine = Depends(get_query_engine),
):
    return await engine.get_by_id(log_id)


@router.get("", response_model=List[LogRecord])
async def get_logs(engine: LogQueryEngine = Depends(get_query_engine)):
    """All logs in insertion order. Fails with the not-found envelope when empty."""
    return await engine.get_all()

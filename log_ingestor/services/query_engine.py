# log_ingestor/services/query_engine.py
"""
Query engine: filter stored logs with any subset of six predicates.

Predicates (each one is skipped when its criterion is None):
- level:       case-insensitive equality
- message:     case-sensitive substring
- resource_id: exact equality
- start_time:  timestamp strictly after
- end_time:    timestamp strictly before
- regex:       case-insensitive search anywhere in the message

All present predicates are ANDed in one pass over `store.all()`, and the
store's insertion order is kept. The engine holds no state of its own, so a
single instance can serve concurrent requests.

`search` (behind /logs/search) uses stricter match-by-example rules instead;
see `build_exact_predicate`.

Only `filter_by_level`, `get_by_id` and `get_all` treat "nothing found" as an
error; the other searches return an empty list.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from log_ingestor.core.errors import LogNotFoundError, MalformedInputError, PatternCompilationError
from log_ingestor.schemas.logs import LogRecord
from log_ingestor.services.log_store import LogStore

logger = logging.getLogger(__name__)

Predicate = Callable[[LogRecord], bool]


@dataclass(frozen=True)
class FilterCriteria:
    """Optional filter values. None means "not filtered on"."""

    level: Optional[str] = None
    message: Optional[str] = None
    resource_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    regex: Optional[str] = None

    def applied(self) -> Dict[str, str]:
        """Echo of the criteria actually set, for logging."""
        return {
            f.name: str(getattr(self, f.name))
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def to_naive_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC; bring aware bounds onto the same footing."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def compile_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise PatternCompilationError(pattern, str(e)) from e


def build_predicate(criteria: FilterCriteria) -> Predicate:
    """
    Compose the criteria into a single predicate.

    The regex is compiled here, once, so a bad pattern fails before any
    record is looked at.
    """
    checks: List[Predicate] = []

    if criteria.level is not None:
        level = criteria.level.lower()
        checks.append(lambda r: r.level.lower() == level)

    if criteria.message is not None:
        needle = criteria.message
        checks.append(lambda r: needle in r.message)

    if criteria.resource_id is not None:
        resource_id = criteria.resource_id
        checks.append(lambda r: r.resource_id == resource_id)

    if criteria.start_time is not None:
        start = to_naive_utc(criteria.start_time)
        checks.append(lambda r: r.timestamp > start)

    if criteria.end_time is not None:
        end = to_naive_utc(criteria.end_time)
        checks.append(lambda r: r.timestamp < end)

    if criteria.regex is not None:
        pattern = compile_pattern(criteria.regex)
        checks.append(lambda r: pattern.search(r.message) is not None)

    return lambda record: all(check(record) for check in checks)


def build_exact_predicate(criteria: FilterCriteria) -> Predicate:
    """
    Match-by-example rules used by `/logs/search`.

    level, message and resource_id must equal the record's value, case
    included. The time window is inclusive and only applies when both
    bounds are set; a lone bound is ignored. regex is not consulted.
    """
    checks: List[Predicate] = []

    if criteria.level is not None:
        level = criteria.level
        checks.append(lambda r: r.level == level)

    if criteria.message is not None:
        message = criteria.message
        checks.append(lambda r: r.message == message)

    if criteria.resource_id is not None:
        resource_id = criteria.resource_id
        checks.append(lambda r: r.resource_id == resource_id)

    if criteria.start_time is not None and criteria.end_time is not None:
        start = to_naive_utc(criteria.start_time)
        end = to_naive_utc(criteria.end_time)
        checks.append(lambda r: start <= r.timestamp <= end)

    return lambda record: all(check(record) for check in checks)


class LogQueryEngine:
    """Read-side operations over a `LogStore`."""

    def __init__(self, store: LogStore):
        self.store = store

    async def filter_all(self, criteria: FilterCriteria) -> List[LogRecord]:
        """All six predicates. An empty result is a normal answer."""
        return await self._select(build_predicate(criteria), criteria)

    async def _select(self, predicate: Predicate, criteria: FilterCriteria) -> List[LogRecord]:
        records = await self.store.all()
        matched = [record for record in records if predicate(record)]
        logger.info(
            "Matched %d of %d logs (filters=%s)",
            len(matched),
            len(records),
            criteria.applied(),
        )
        return matched

    async def search(
        self,
        level: Optional[str] = None,
        message: Optional[str] = None,
        resource_id: Optional[str] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[LogRecord]:
        """Exact-match search; see `build_exact_predicate`. May return []."""
        criteria = FilterCriteria(
            level=level,
            message=message,
            resource_id=resource_id,
            start_time=start_time,
            end_time=end_time,
        )
        return await self._select(build_exact_predicate(criteria), criteria)

    async def filter_by_level(self, level: str) -> List[LogRecord]:
        """Raises LogNotFoundError when no log has this level."""
        matched = await self.filter_all(FilterCriteria(level=level))
        if not matched:
            raise LogNotFoundError(f"No logs found with level {level}")
        return matched

    async def filter_by_date_range(
        self, start_time: Optional[datetime], end_time: Optional[datetime]
    ) -> List[LogRecord]:
        """Logs strictly between the two bounds. Both bounds are required."""
        if start_time is None or end_time is None:
            raise MalformedInputError("Both startTime and endTime are required")
        return await self.filter_all(FilterCriteria(start_time=start_time, end_time=end_time))

    async def filter_by_regex(self, pattern: Optional[str]) -> List[LogRecord]:
        """Raises PatternCompilationError on invalid syntax."""
        if pattern is None:
            raise MalformedInputError("A regex is required")
        return await self.filter_all(FilterCriteria(regex=pattern))

    async def get_by_id(self, log_id: int) -> LogRecord:
        record = await self.store.get(log_id)
        if record is None:
            raise LogNotFoundError(f"Log with id {log_id} does not exist")
        logger.debug("Retrieved log %d", log_id)
        return record

    async def get_all(self) -> List[LogRecord]:
        """Every stored log. Raises LogNotFoundError when the store is empty."""
        records = await self.store.all()
        if not records:
            raise LogNotFoundError("No logs found")
        logger.info("Retrieved %d logs", len(records))
        return records

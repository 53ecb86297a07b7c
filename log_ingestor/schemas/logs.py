# log_ingestor/schemas/logs.py
"""
Log record schemas.

`LogRecord` is the one shape a log takes once stored: the store returns it,
the query engine filters it, the API serializes it. Field names are
snake_case in Python and camelCase on the wire (resourceId, traceId, ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class LogMetadata(BaseModel):
    """Nested metadata carried with a log. Persisted, not filterable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    parent_resource_id: Optional[str] = Field(default=None, description="Parent resource identifier")


class LogRecord(BaseModel):
    """
    A stored log record.

    Immutable: the store hands back a copy with `id` filled in, and nothing
    touches it afterwards.

    Example:
    {
      "id": 1,
      "level": "error",
      "message": "Failed to connect to DB",
      "resourceId": "server-1234",
      "timestamp": "2023-09-15T08:00:00Z",
      "traceId": "abc-xyz-123",
      "spanId": "span-456",
      "commit": "5e5342f",
      "metadata": {"parentResourceId": "server-0987"}
    }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[int] = Field(default=None, description="Store-assigned identifier")
    level: str = Field(..., description="Log level (compared case-insensitively)")
    message: str = Field(..., description="Free-text log message")
    resource_id: str = Field(..., description="Resource identifier (exact match)")
    timestamp: datetime = Field(..., description="Ingestion time, naive UTC")
    trace_id: Optional[str] = Field(default=None, description="Trace identifier")
    span_id: Optional[str] = Field(default=None, description="Span identifier")
    commit: Optional[str] = Field(default=None, description="Commit hash of the emitting build")
    metadata: LogMetadata = Field(default_factory=LogMetadata)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat() + "Z"

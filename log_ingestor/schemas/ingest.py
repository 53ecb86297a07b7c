# log_ingestor/schemas/ingest.py
"""
Schemas for POST /logs/ingest.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from log_ingestor.schemas.logs import LogMetadata


class LogIngestRequest(BaseModel):
    """
    Body accepted by the ingest endpoint.

    `id` and `timestamp` may be sent but are not kept: the store assigns the
    id and ingestion stamps the current time.

    Example:
    {
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

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    level: str = Field(..., description="Log level")
    message: str = Field(..., description="Log message")
    resource_id: str = Field(..., description="Resource identifier")
    timestamp: Optional[datetime] = Field(default=None, description="Ignored; replaced at ingestion")
    trace_id: Optional[str] = Field(default=None)
    span_id: Optional[str] = Field(default=None)
    commit: Optional[str] = Field(default=None)
    metadata: LogMetadata = Field(default_factory=LogMetadata)

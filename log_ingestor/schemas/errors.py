# log_ingestor/schemas/errors.py
"""
Uniform error envelope returned for every handled failure.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


class ErrorDetails(BaseModel):
    """
    Example:
    {
      "timestamp": "2023-11-19T10:00:00.123456Z",
      "message": "Log with id 42 does not exist",
      "description": "uri=/logs/42"
    }
    """
    timestamp: str = Field(default_factory=_utc_now_iso, description="When the error was produced")
    message: str = Field(..., description="What went wrong")
    description: str = Field(..., description="Request path or validation detail")

# log_ingestor/db/models.py
"""
SQLAlchemy ORM models for the log ingestor.

Notes:
- Timestamps are stored as naive UTC datetimes (timezone-less) for SQLite simplicity.
  We convert to/from ISO 8601 with a trailing "Z" at the API boundary.
- The nested `metadata` object of a log is flattened into `parent_resource_id`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


class LogEntry(Base):
    """
    A single ingested log record.

    `id` is autoincremented by SQLite and doubles as the insertion order
    used when the whole table is read back.
    """

    __tablename__ = "log_entries"
    # AUTOINCREMENT keeps ids from being reused after deletes.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    level: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    resource_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)

    # Naive UTC datetime. Assigned at ingestion, never by the caller.
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True, nullable=False)

    trace_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    span_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    commit: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    parent_resource_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

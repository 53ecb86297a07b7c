"""
Pytest configuration and shared fixtures.
"""
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Generator

# Point the app at a throwaway database before anything imports settings.
os.environ["ENV"] = "test"
os.environ["STORE_BACKEND"] = "sqlite"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + str(Path(tempfile.mkdtemp()) / "startup.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from log_ingestor.db.models import Base
from log_ingestor.db.session import get_session_factory
from log_ingestor.main import app
from log_ingestor.schemas.logs import LogMetadata, LogRecord
from log_ingestor.services.log_store import InMemoryLogStore
from log_ingestor.services.query_engine import LogQueryEngine


def make_record(
    level: str = "error",
    message: str = "Failed to connect to DB",
    resource_id: str = "server-1234",
    timestamp: datetime = datetime(2023, 9, 15, 10, 0, 0),
    **extra,
) -> LogRecord:
    return LogRecord(
        level=level,
        message=message,
        resource_id=resource_id,
        timestamp=timestamp,
        **extra,
    )


@pytest.fixture
def sample_ingest_body():
    return {
        "level": "error",
        "message": "Failed to connect to DB",
        "resourceId": "server-1234",
        "timestamp": "2023-09-15T08:00:00Z",
        "traceId": "abc-xyz-123",
        "spanId": "span-456",
        "commit": "5e5342f",
        "metadata": {"parentResourceId": "server-0987"},
    }


@pytest.fixture
def memory_store() -> InMemoryLogStore:
    return InMemoryLogStore()


@pytest.fixture
async def seeded_store(memory_store) -> InMemoryLogStore:
    """
    Store with four logs, in this insertion order:
      1 error  "Failed to connect to DB"    server-1234  10:00
      2 info   "Started"                    server-1234  10:05
      3 ERROR  "Disk failed on /dev/sda"    server-5678  10:10
      4 warn   "Connection succeeded"       server-5678  10:15
    """
    await memory_store.put(make_record("error", "Failed to connect to DB", "server-1234",
                                       datetime(2023, 9, 15, 10, 0),
                                       trace_id="abc-xyz-123", span_id="span-456", commit="5e5342f",
                                       metadata=LogMetadata(parent_resource_id="server-0987")))
    await memory_store.put(make_record("info", "Started", "server-1234", datetime(2023, 9, 15, 10, 5)))
    await memory_store.put(make_record("ERROR", "Disk failed on /dev/sda", "server-5678",
                                       datetime(2023, 9, 15, 10, 10)))
    await memory_store.put(make_record("warn", "Connection succeeded", "server-5678",
                                       datetime(2023, 9, 15, 10, 15)))
    return memory_store


@pytest.fixture
def engine(seeded_store) -> LogQueryEngine:
    return LogQueryEngine(seeded_store)


@pytest.fixture
def db_path(tmp_path) -> Path:
    """SQLite file with the schema already created."""
    path = tmp_path / "logs.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
async def db_session(db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def test_client(db_path) -> Generator[TestClient, None, None]:
    """Test client whose requests hit a per-test SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    app.dependency_overrides[get_session_factory] = lambda: factory

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()

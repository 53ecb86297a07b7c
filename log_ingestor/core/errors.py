# log_ingestor/core/errors.py
"""
Domain exceptions raised by the query engine and ingestion service.

Two kinds of client-visible failure exist:
- LogNotFoundError: a lookup or single-criterion search came back empty.
- MalformedInputError: the caller sent something we cannot interpret.

The HTTP layer (log_ingestor.main) turns both into the error envelope.
"""

from __future__ import annotations


class LogIngestorError(Exception):
    """Base class for all errors raised by this package."""


class LogNotFoundError(LogIngestorError):
    """No log matched where at least one was required."""


class MalformedInputError(LogIngestorError):
    """Client input could not be interpreted."""


class PatternCompilationError(MalformedInputError):
    """A regex filter did not compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regex {pattern!r}: {reason}")

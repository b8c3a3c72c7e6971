"""Error types raised by scripture_study.

"Not found" is never an error: lookups return ``None`` or an empty sequence.
"""

from __future__ import annotations


class ScriptureStudyError(Exception):
    """Base class for all scripture_study errors."""


class NotConnectedError(ScriptureStudyError):
    """A data operation was invoked before ``connect()`` succeeded."""

    def __init__(self, operation: str | None = None) -> None:
        self.operation = operation
        if operation:
            super().__init__(f"Database not connected (called {operation})")
        else:
            super().__init__("Database not connected")


class BackendError(ScriptureStudyError):
    """A store-level fault detected by scripture_study itself.

    Driver and network failures surface as ``sqlalchemy.exc.SQLAlchemyError``
    and are propagated unchanged; this hierarchy covers faults we detect
    while normalizing rows.
    """


class MalformedRowError(BackendError):
    """A stored row cannot be normalized into a domain record."""

    def __init__(self, table: str, key: str, reason: str) -> None:
        self.table = table
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed row in {table} ({key}): {reason}")


class ConfigurationError(ScriptureStudyError):
    """Required configuration (e.g. an API key) is missing."""


class UpstreamAPIError(ScriptureStudyError):
    """An AI provider returned a non-success response."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider} API error: {message}")

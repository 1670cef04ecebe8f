"""
Exception hierarchy for the telemetry pipeline.

Used by the durable store, the ingestion/query use cases and the
client-side components. All telemetry exceptions inherit from
TelemetryError and can carry a user-facing message.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class TelemetryError(Exception):
    """Base exception for all telemetry errors."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or "An error occurred. Please try again."
        self.details = details or {}


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


class ValidationError(TelemetryError):
    """Raised when an ingestion request is malformed (event name missing)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", message)
        super().__init__(message, **kwargs)


# -----------------------------------------------------------------------------
# Durable store
# -----------------------------------------------------------------------------


class PersistenceError(TelemetryError):
    """Raised when the durable store fails to read or write."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation


# -----------------------------------------------------------------------------
# Client side
# -----------------------------------------------------------------------------


class NetworkError(TelemetryError):
    """Raised when the events API cannot be reached or answers with an error."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.url = url
        self.status_code = status_code


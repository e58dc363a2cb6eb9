"""
Error taxonomy for the realtime client.

Every failure the transport or the scheduler can report is one of these
exception classes; ``kind`` lets callers branch without isinstance chains.
"""
from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Discriminator carried by every RealtimeError."""

    OFFLINE = "offline"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP = "http"
    APPLICATION = "application"
    CIRCUIT_OPEN = "circuit_open"
    UNEXPECTED = "unexpected"


class RealtimeError(Exception):
    """Base class for all realtime client failures."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class OfflineError(RealtimeError):
    """The device reports no connectivity; no request was made."""

    kind = ErrorKind.OFFLINE

    def __init__(self, message: str = "No internet connection") -> None:
        super().__init__(message)


class RequestTimeoutError(RealtimeError):
    """The request did not complete within the timeout and was aborted."""

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        message: str = "Request timeout - server may be slow or unreachable",
        timeout_ms: int | None = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(message)


class TransportError(RealtimeError):
    """Connection-level failure (DNS, refused connection, reset...)."""

    kind = ErrorKind.TRANSPORT


class InvalidResponseError(TransportError):
    """Server answered with a body that is not the expected JSON."""


class HttpError(RealtimeError):
    """Server answered with a non-2xx status."""

    kind = ErrorKind.HTTP

    def __init__(self, status: int, message: str, body: dict | None = None) -> None:
        self.status = status
        self.body = body or {}
        super().__init__(message)


class ApplicationError(RealtimeError):
    """Server answered 2xx but reported ``success: false``."""

    kind = ErrorKind.APPLICATION

    def __init__(self, message: str, body: dict | None = None) -> None:
        self.body = body or {}
        super().__init__(message)


class CircuitOpenError(RealtimeError):
    """Polling is paused because too many consecutive ticks failed."""

    kind = ErrorKind.CIRCUIT_OPEN

    def __init__(self, consecutive_errors: int) -> None:
        self.consecutive_errors = consecutive_errors
        super().__init__("Real-time updates paused due to connection issues")

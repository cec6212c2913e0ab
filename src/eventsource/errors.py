"""Error hierarchy for the event source client."""
from __future__ import annotations


class EventSourceError(Exception):
    """Base error for all eventsource errors."""

    retryable: bool = True

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class AlreadyConnectedError(EventSourceError):
    """``connect`` was called while a connect loop is already running."""

    retryable = False

    def __init__(self, message: str = "The client is already connected.") -> None:
        super().__init__(message)


# ---------------------------------------------------------------------------
# Transient errors (trigger a reconnect)
# ---------------------------------------------------------------------------


class ConnectionFailedError(EventSourceError):
    """Opening or reading the event stream failed at the transport level."""


class RequestTimeoutError(ConnectionFailedError):
    """Connecting or reading timed out."""


class ResponseStatusError(EventSourceError):
    """The server answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code


class StreamClosedError(EventSourceError):
    """The server closed the response body."""


# ---------------------------------------------------------------------------
# Terminal errors
# ---------------------------------------------------------------------------


class RetriesExhaustedError(EventSourceError):
    """The retry bound was reached; the client stopped reconnecting."""

    retryable = False

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        last_error: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=last_error)
        self.attempts = attempts
        self.last_error = last_error


def error_from_status_code(status_code: int, url: str) -> ResponseStatusError:
    """Build the error reported for a non-2xx response."""
    return ResponseStatusError(
        f"Event source {url} responded with HTTP {status_code}",
        status_code=status_code,
    )

"""eventsource: Server-Sent Events client with automatic reconnection."""
from __future__ import annotations

__version__ = "0.1.0"

# Types
from eventsource.types.config import (
    AbortController,
    AbortSignal,
    ClientConfig,
    RetryPolicy,
    TransportTimeout,
)
from eventsource.types.enums import NotificationKind
from eventsource.types.event import ServerSentEvent
from eventsource.types.state import ConnectionState

# Errors
from eventsource.errors import (
    AlreadyConnectedError,
    ConnectionFailedError,
    EventSourceError,
    RequestTimeoutError,
    ResponseStatusError,
    RetriesExhaustedError,
    StreamClosedError,
)

# Core
from eventsource._sse import parse_sse_lines
from eventsource.client import EventSourceClient
from eventsource.dispatcher import Dispatcher
from eventsource.observers import EventRecorder, logging_observer

__all__ = [
    "__version__",
    # Types
    "AbortController",
    "AbortSignal",
    "ClientConfig",
    "ConnectionState",
    "NotificationKind",
    "RetryPolicy",
    "ServerSentEvent",
    "TransportTimeout",
    # Errors
    "AlreadyConnectedError",
    "ConnectionFailedError",
    "EventSourceError",
    "RequestTimeoutError",
    "ResponseStatusError",
    "RetriesExhaustedError",
    "StreamClosedError",
    # Core
    "Dispatcher",
    "EventRecorder",
    "EventSourceClient",
    "logging_observer",
    "parse_sse_lines",
]

"""Types for the event source client."""
from __future__ import annotations

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

__all__ = [
    "AbortController",
    "AbortSignal",
    "ClientConfig",
    "ConnectionState",
    "NotificationKind",
    "RetryPolicy",
    "ServerSentEvent",
    "TransportTimeout",
]

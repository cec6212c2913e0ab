"""Enumeration types for the event source client."""
from __future__ import annotations

from enum import StrEnum


class NotificationKind(StrEnum):
    """Lifecycle notifications delivered to observers."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"
    MESSAGE = "message"

"""Built-in observers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from eventsource.types.enums import NotificationKind
from eventsource.types.event import ServerSentEvent

Observer = Callable[[NotificationKind, Any], None]


def logging_observer(logger: logging.Logger | None = None) -> Observer:
    """Create an observer that logs every notification."""
    log = logger or logging.getLogger("eventsource")

    def observer(kind: NotificationKind, payload: Any) -> None:
        if kind == NotificationKind.MESSAGE:
            log.info("SSE message: event=%s id=%s data=%r", payload.event, payload.id, payload.data)
        elif kind == NotificationKind.ERROR:
            log.warning("SSE error: %s", payload)
        else:
            log.info("SSE %s", kind)

    return observer


@dataclass
class EventRecorder:
    """Records notifications in the order they were delivered."""

    events: list[ServerSentEvent] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    history: list[NotificationKind] = field(default_factory=list)
    connects: int = 0
    disconnects: int = 0

    def __call__(self, kind: NotificationKind, payload: Any) -> None:
        self.history.append(kind)
        if kind == NotificationKind.MESSAGE:
            self.events.append(payload)
        elif kind == NotificationKind.ERROR:
            self.errors.append(payload)
        elif kind == NotificationKind.CONNECTED:
            self.connects += 1
        elif kind == NotificationKind.DISCONNECTED:
            self.disconnects += 1

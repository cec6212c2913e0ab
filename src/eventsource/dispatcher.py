"""Synchronous dispatcher for client lifecycle notifications."""
from __future__ import annotations

from typing import Any, Callable

from eventsource.types.enums import NotificationKind


class Dispatcher:
    """Synchronous publish-subscribe dispatcher.

    Listeners subscribe to one :class:`NotificationKind` or receive every
    notification. Notifications are delivered on the emitting thread, in
    emission order; listeners of a kind run in registration order, after the
    global listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[NotificationKind, list[Callable[..., Any]]] = {}
        self._global_listeners: list[Callable[[NotificationKind, Any], Any]] = []

    def subscribe(self, kind: NotificationKind, callback: Callable[..., Any]) -> None:
        """Register a callback for a specific notification kind.

        ``connected`` and ``disconnected`` callbacks take no arguments;
        ``error`` callbacks receive the exception and ``message`` callbacks
        the :class:`ServerSentEvent`.
        """
        self._listeners.setdefault(kind, []).append(callback)

    def unsubscribe(self, kind: NotificationKind, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(kind, [])
        if callback in listeners:
            listeners.remove(callback)

    def on_all(self, callback: Callable[[NotificationKind, Any], Any]) -> None:
        """Register a callback that receives ``(kind, payload)`` for every notification."""
        self._global_listeners.append(callback)

    def emit(self, kind: NotificationKind, payload: Any = None) -> None:
        """Dispatch a notification to all matching listeners."""
        for cb in list(self._global_listeners):
            cb(kind, payload)
        for cb in list(self._listeners.get(kind, [])):
            if kind in _NO_PAYLOAD:
                cb()
            else:
                cb(payload)


_NO_PAYLOAD = frozenset({NotificationKind.CONNECTED, NotificationKind.DISCONNECTED})

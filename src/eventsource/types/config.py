"""Configuration types."""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for the reconnect loop.

    The defaults give a fixed interval: ``interval`` seconds between
    attempts, retrying forever. A server ``retry:`` field replaces
    ``interval`` for the lifetime of the client.
    """

    interval: float = 3.0
    max_retries: int | None = None
    backoff_multiplier: float = 1.0
    max_delay: float = 60.0
    jitter: bool = False
    on_retry: Callable[[int, Exception, float], None] | None = field(
        default=None, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError("interval must not be negative")
        if self.max_retries is not None and self.max_retries < 0:
            raise ValueError("max_retries must not be negative")


@dataclass(frozen=True)
class TransportTimeout:
    """Timeouts applied to each connection attempt.

    ``read`` defaults to ``None`` since event streams may stay idle for a
    long time between events.
    """

    connect: float = 5.0
    read: float | None = None


@dataclass(frozen=True)
class ClientConfig:
    """Top-level client configuration."""

    retry: RetryPolicy = field(default_factory=RetryPolicy)
    timeout: TransportTimeout = field(default_factory=TransportTimeout)
    headers: dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    last_event_id: str | None = None

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ClientConfig:
        """Create a config from ``EVENTSOURCE_*`` environment variables.

        Recognised: ``EVENTSOURCE_RETRY_MS``, ``EVENTSOURCE_MAX_RETRIES``,
        ``EVENTSOURCE_CONNECT_TIMEOUT``, ``EVENTSOURCE_READ_TIMEOUT`` and
        ``EVENTSOURCE_LAST_EVENT_ID``. Unset variables keep the defaults.
        """
        env = os.environ if environ is None else environ

        retry_ms = env.get("EVENTSOURCE_RETRY_MS")
        max_retries = env.get("EVENTSOURCE_MAX_RETRIES")
        connect_timeout = env.get("EVENTSOURCE_CONNECT_TIMEOUT")
        read_timeout = env.get("EVENTSOURCE_READ_TIMEOUT")

        retry = RetryPolicy(
            interval=int(retry_ms) / 1000.0 if retry_ms else RetryPolicy.interval,
            max_retries=int(max_retries) if max_retries else None,
        )
        timeout = TransportTimeout(
            connect=float(connect_timeout) if connect_timeout else TransportTimeout.connect,
            read=float(read_timeout) if read_timeout else None,
        )

        return cls(
            retry=retry,
            timeout=timeout,
            last_event_id=env.get("EVENTSOURCE_LAST_EVENT_ID") or None,
        )


class AbortSignal:
    """An observable flag indicating whether an operation has been aborted.

    Backed by a :class:`threading.Event` so a pending :meth:`wait` returns as
    soon as another thread aborts.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._listeners: list[Callable[[], None]] = []

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block for up to *timeout* seconds; return ``True`` if aborted."""
        return self._event.wait(timeout)

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Call *callback* on abort, immediately if already aborted."""
        if self.aborted:
            callback()
            return
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _abort(self) -> None:
        if self._event.is_set():
            return
        self._event.set()
        for cb in list(self._listeners):
            cb()


class AbortController:
    """Controls an :class:`AbortSignal` to cancel an in-flight operation."""

    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self) -> None:
        self.signal._abort()

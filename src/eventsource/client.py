"""Event source client: connect loop with automatic reconnection."""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any, Callable

import httpx

from eventsource import _retry
from eventsource._http import EVENT_STREAM_MEDIA_TYPE, EventStreamResponse, HttpTransport
from eventsource._sse import parse_sse_lines
from eventsource.dispatcher import Dispatcher
from eventsource.errors import (
    AlreadyConnectedError,
    EventSourceError,
    RetriesExhaustedError,
    StreamClosedError,
)
from eventsource.types.config import AbortController, AbortSignal, ClientConfig
from eventsource.types.enums import NotificationKind
from eventsource.types.event import ServerSentEvent
from eventsource.types.state import ConnectionState

logger = logging.getLogger("eventsource")


class EventSourceClient:
    """Consumes a ``text/event-stream`` endpoint and keeps it alive.

    :meth:`connect` blocks the calling thread for the lifetime of the
    logical stream: it opens the request, parses the body, and reconnects
    after failures until :meth:`disconnect` is called, the abort signal
    fires, or the retry bound is reached. Observers registered with
    :meth:`on_connect`, :meth:`on_disconnect`, :meth:`on_error` and
    :meth:`on_message` are called synchronously on that thread.

    One connect loop runs at a time per client; ``last_event_id`` and
    ``retry_interval`` carry over between reconnects and between
    successive :meth:`connect` calls.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = HttpTransport(http_client, self.config.timeout)
        self._dispatcher = Dispatcher()
        self._state = ConnectionState(
            retry_interval=self.config.retry.interval,
            last_event_id=self.config.last_event_id,
            max_retries=self.config.retry.max_retries,
        )
        self._controller: AbortController | None = None
        self._response: EventStreamResponse | None = None
        self._disconnect_notified = False
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_connect(self, callback: Callable[[], Any]) -> Callable[[], Any]:
        self._dispatcher.subscribe(NotificationKind.CONNECTED, callback)
        return callback

    def on_disconnect(self, callback: Callable[[], Any]) -> Callable[[], Any]:
        self._dispatcher.subscribe(NotificationKind.DISCONNECTED, callback)
        return callback

    def on_error(
        self, callback: Callable[[Exception], Any]
    ) -> Callable[[Exception], Any]:
        self._dispatcher.subscribe(NotificationKind.ERROR, callback)
        return callback

    def on_message(
        self, callback: Callable[[ServerSentEvent], Any]
    ) -> Callable[[ServerSentEvent], Any]:
        self._dispatcher.subscribe(NotificationKind.MESSAGE, callback)
        return callback

    def on_all(
        self, callback: Callable[[NotificationKind, Any], Any]
    ) -> Callable[[NotificationKind, Any], Any]:
        """Register *callback* for every notification as ``(kind, payload)``."""
        self._dispatcher.on_all(callback)
        return callback

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def last_event_id(self) -> str | None:
        return self._state.last_event_id

    @property
    def retry_interval(self) -> float:
        """Seconds to wait before the next reconnect."""
        return self._state.retry_interval

    @property
    def retry_count(self) -> int:
        return self._state.retry_count

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self, url: str, signal: AbortSignal | None = None) -> None:
        """Open *url* and keep the event stream alive.

        Returns when the loop stops. A call made while another loop is
        running reports :class:`AlreadyConnectedError` to the error
        observers and returns without affecting the active loop.
        """
        state = self._state
        with self._lock:
            already_running = state.running
            if not already_running:
                state.running = True
        if already_running:
            error = AlreadyConnectedError()
            logger.warning("Ignoring connect to %s: %s", url, error)
            self._dispatcher.emit(NotificationKind.ERROR, error)
            return

        controller = AbortController()
        self._controller = controller
        self._disconnect_notified = False
        state.retry_count = 0

        controller.signal.add_listener(self._close_response)
        if signal is not None:
            signal.add_listener(controller.abort)

        try:
            self._run(url, self._request_headers(), controller.signal)
        finally:
            if signal is not None:
                signal.remove_listener(controller.abort)
            state.running = False
            if self._controller is controller:
                self._controller = None
            if not self._disconnect_notified:
                logger.info("Disconnected from %s", url)
                self._dispatcher.emit(NotificationKind.DISCONNECTED)

    def disconnect(self) -> None:
        """Stop the connect loop and cancel any in-flight attempt.

        Interrupts a blocked read and a pending retry wait. Always notifies
        the disconnect observers, even when no loop is running.
        """
        state = self._state
        with self._lock:
            was_running = state.running
            state.running = False
        if was_running:
            self._disconnect_notified = True

        controller = self._controller
        self._controller = None
        if controller is not None:
            controller.abort()

        logger.info("Disconnect requested")
        self._dispatcher.emit(NotificationKind.DISCONNECTED)

    def process_event_stream(
        self, lines: Iterable[str], signal: AbortSignal | None = None
    ) -> int:
        """Parse *lines* and notify message observers for each event.

        Updates ``last_event_id`` and ``retry_interval`` as the stream
        dictates. Returns the number of events dispatched.
        """
        count = 0
        for event in parse_sse_lines(lines, self._state, signal):
            logger.debug(
                "Event received: event=%s id=%s bytes=%d",
                event.event,
                event.id,
                len(event.data),
            )
            self._dispatcher.emit(NotificationKind.MESSAGE, event)
            count += 1
        return count

    def close(self) -> None:
        """Disconnect if needed and release the HTTP client."""
        if self._state.running:
            self.disconnect()
        self._transport.close()

    def __enter__(self) -> EventSourceClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _request_headers(self) -> httpx.Headers:
        headers = httpx.Headers(self.config.headers)
        headers["Accept"] = EVENT_STREAM_MEDIA_TYPE
        headers["Cache-Control"] = "no-cache"
        return headers

    def _run(self, url: str, headers: httpx.Headers, signal: AbortSignal) -> None:
        state = self._state
        policy = self.config.retry
        last_error: Exception | None = None

        while state.running and not signal.aborted:
            if _retry.retries_exhausted(state.retry_count, state.max_retries):
                self._give_up(url, last_error)
                return

            headers.pop("Last-Event-ID", None)
            if state.last_event_id is not None:
                headers["Last-Event-ID"] = state.last_event_id

            try:
                self._attempt(url, headers, signal)
            except EventSourceError as exc:
                if signal.aborted or not state.running:
                    logger.debug("Attempt on %s ended by abort: %s", url, exc)
                    return
                last_error = exc
                logger.warning("Event source %s failed: %s", url, exc)
                self._dispatcher.emit(NotificationKind.ERROR, exc)

            if signal.aborted or not state.running:
                return

            state.retry_count += 1
            if _retry.retries_exhausted(state.retry_count, state.max_retries):
                continue

            delay = _retry.calculate_delay(
                state.retry_count - 1, state.retry_interval, policy
            )
            if policy.on_retry is not None and last_error is not None:
                policy.on_retry(state.retry_count, last_error, delay)
            logger.info(
                "Reconnecting to %s in %.3fs (retry %d)", url, delay, state.retry_count
            )
            if _retry.wait_before_retry(delay, signal):
                return

    def _attempt(self, url: str, headers: httpx.Headers, signal: AbortSignal) -> None:
        logger.debug(
            "Connecting to %s (last_event_id=%s)", url, self._state.last_event_id
        )
        with self._transport.open_stream(url, httpx.Headers(headers)) as response:
            self._response = response
            try:
                if signal.aborted:
                    return
                self._state.retry_count = 0
                logger.info("Connected to %s", url)
                self._dispatcher.emit(NotificationKind.CONNECTED)
                self.process_event_stream(response.iter_lines(), signal)
            finally:
                self._response = None

        if not signal.aborted:
            raise StreamClosedError(f"Event source {url} closed the stream")

    def _give_up(self, url: str, last_error: Exception | None) -> None:
        attempts = self._state.retry_count
        error = RetriesExhaustedError(
            f"Gave up on {url} after {attempts} failed attempts",
            attempts=attempts,
            last_error=last_error,
        )
        self._state.running = False
        logger.error("%s", error)
        self._dispatcher.emit(NotificationKind.ERROR, error)

    def _close_response(self) -> None:
        response = self._response
        if response is not None:
            response.close()

"""HTTP transport wrapper around httpx."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from eventsource.errors import (
    ConnectionFailedError,
    RequestTimeoutError,
    error_from_status_code,
)
from eventsource.types.config import TransportTimeout

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


class EventStreamResponse:
    """An open event-stream response.

    :meth:`close` may be called from another thread to interrupt a blocked
    read; the reader then sees the iteration end or fail.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._closed

    def iter_lines(self) -> Iterator[str]:
        """Yield decoded body lines, mapping transport failures.

        Reads after :meth:`close` end the iteration quietly.
        """
        try:
            for line in self._response.iter_lines():
                yield line
        except httpx.TimeoutException as exc:
            if self._closed:
                return
            raise RequestTimeoutError(f"Timed out reading event stream: {exc}", cause=exc) from exc
        except (httpx.RequestError, httpx.StreamError) as exc:
            if self._closed:
                return
            raise ConnectionFailedError(f"Error reading event stream: {exc}", cause=exc) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._response.close()


class HttpTransport:
    """Thin wrapper around :mod:`httpx` that maps errors into eventsource exceptions."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: TransportTimeout | None = None,
    ) -> None:
        t = timeout or TransportTimeout()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(
                connect=t.connect,
                read=t.read,
                write=t.connect,
                pool=t.connect,
            ),
        )

    @contextmanager
    def open_stream(
        self, url: str, headers: httpx.Headers | dict[str, str]
    ) -> Iterator[EventStreamResponse]:
        """Send a streaming GET and yield the open response.

        Returns once the response headers are received; the body is read
        lazily through :meth:`EventStreamResponse.iter_lines`. Raises an
        eventsource error on non-2xx status or transport failure. The
        response is closed on every exit path.
        """
        try:
            with self._client.stream("GET", url, headers=headers) as resp:
                if resp.status_code < 200 or resp.status_code >= 300:
                    raise error_from_status_code(resp.status_code, url)
                stream = EventStreamResponse(resp)
                try:
                    yield stream
                finally:
                    stream.close()
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Timed out connecting to {url}: {exc}", cause=exc) from exc
        except httpx.RequestError as exc:
            raise ConnectionFailedError(f"Error connecting to {url}: {exc}", cause=exc) from exc

    def close(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            self._client.close()

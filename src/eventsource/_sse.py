"""Server-Sent Events stream parser."""
from __future__ import annotations

from collections.abc import Iterable, Iterator

from eventsource.types.config import AbortSignal
from eventsource.types.event import ServerSentEvent
from eventsource.types.state import ConnectionState


MAX_RETRY_MS = 2**31 - 1


def parse_retry(value: str) -> float | None:
    """Convert a ``retry`` field value in milliseconds to seconds.

    Only plain ASCII digits up to ``MAX_RETRY_MS`` are accepted; anything
    else returns ``None``.
    """
    if not value or not (value.isascii() and value.isdigit()):
        return None
    digits = value.lstrip("0") or "0"
    # int() rejects strings past the interpreter digit limit
    if len(digits) > len(str(MAX_RETRY_MS)):
        return None
    millis = int(digits)
    if millis > MAX_RETRY_MS:
        return None
    return millis / 1000.0


def parse_sse_lines(
    lines: Iterable[str],
    state: ConnectionState,
    signal: AbortSignal | None = None,
) -> Iterator[ServerSentEvent]:
    """Parse raw SSE text lines into events.

    Follows the SSE field grammar:

    - Lines beginning with ``:`` are comments (ignored).
    - Blank (or whitespace-only) lines dispatch the current event.
    - Field names: ``event``, ``data``, ``id``, ``retry``; others are ignored.
    - A leading space after the colon is stripped from the field value.

    ``state.last_event_id`` is resolved when a frame ends: no ``id`` field
    leaves it untouched, an empty ``id`` clears it, any other value replaces
    it. ``retry`` updates ``state.retry_interval`` immediately. A frame still
    open when *lines* runs out is discarded. Iteration stops before reading
    the next line once *signal* is aborted.
    """
    event_type = "message"
    data_parts: list[str] = []
    has_data = False
    id_buffer: str | None = None

    for raw_line in lines:
        if signal is not None and signal.aborted:
            return

        line = raw_line.rstrip("\n").rstrip("\r")

        # Blank line -> dispatch
        if line.strip() == "":
            event_id: str | None = None
            if id_buffer == "":
                state.last_event_id = None
            elif id_buffer is not None:
                state.last_event_id = id_buffer
                event_id = id_buffer

            if has_data:
                yield ServerSentEvent(
                    id=event_id, event=event_type, data="\n".join(data_parts)
                )
                if signal is not None and signal.aborted:
                    return

            event_type = "message"
            data_parts = []
            has_data = False
            id_buffer = None
            continue

        # Comment
        if line.startswith(":"):
            continue

        # Parse field
        if ":" in line:
            field_name, _, value = line.partition(":")
            # Strip at most one leading space
            if value.startswith(" "):
                value = value[1:]
        else:
            field_name = line
            value = ""

        if field_name == "event":
            event_type = value
        elif field_name == "data":
            data_parts.append(value)
            has_data = True
        elif field_name == "id":
            id_buffer = value if value.strip() else ""
        elif field_name == "retry":
            interval = parse_retry(value)
            if interval is not None:
                state.retry_interval = interval

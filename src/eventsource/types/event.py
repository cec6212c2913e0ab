"""Event record type."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerSentEvent:
    """One dispatched event.

    ``id`` is only set when the frame carried a non-empty ``id`` field; the
    stream-level last event id lives on :class:`ConnectionState`.
    """

    id: str | None = None
    event: str = "message"
    data: str = ""

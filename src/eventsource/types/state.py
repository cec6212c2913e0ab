"""Mutable connection state shared by the controller and the parser."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConnectionState:
    """State of one client instance.

    The parser only writes ``last_event_id`` and ``retry_interval``; every
    other field belongs to the connect loop.
    """

    retry_interval: float = 3.0
    last_event_id: str | None = None
    max_retries: int | None = None
    retry_count: int = 0
    running: bool = False

    def __post_init__(self) -> None:
        if self.retry_interval < 0:
            raise ValueError("retry_interval must not be negative")

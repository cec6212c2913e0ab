"""Reconnect delay policy."""
from __future__ import annotations

import random
import threading

from eventsource.types.config import AbortSignal, RetryPolicy


def calculate_delay(attempt: int, interval: float, policy: RetryPolicy) -> float:
    """Compute the delay before reconnect attempt *attempt* (0-based).

    *interval* is the current retry interval, which the server may have
    replaced with a ``retry`` field. With the default policy the delay is
    simply *interval*; a ``backoff_multiplier`` above 1 grows it
    exponentially, clamped to *policy.max_delay*, with optional jitter.
    """
    delay = interval * (policy.backoff_multiplier ** attempt)
    if policy.backoff_multiplier > 1.0:
        delay = min(delay, max(policy.max_delay, interval))
    if policy.jitter:
        delay *= random.uniform(0.5, 1.5)
    return max(delay, 0.0)


def retries_exhausted(retry_count: int, max_retries: int | None) -> bool:
    """Return ``True`` once *retry_count* reaches the configured bound."""
    return max_retries is not None and retry_count >= max_retries


def wait_before_retry(delay: float, signal: AbortSignal) -> bool:
    """Sleep for *delay* seconds unless *signal* aborts first.

    Returns ``True`` if the wait was interrupted by an abort.
    """
    if delay <= 0:
        return signal.aborted
    return signal.wait(min(delay, threading.TIMEOUT_MAX))

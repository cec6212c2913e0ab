"""Tests for eventsource.types configuration and state."""
from __future__ import annotations

import pytest

from eventsource.types.config import (
    AbortController,
    AbortSignal,
    ClientConfig,
    RetryPolicy,
    TransportTimeout,
)
from eventsource.types.enums import NotificationKind
from eventsource.types.event import ServerSentEvent
from eventsource.types.state import ConnectionState


# ---------------------------------------------------------------------------
# RetryPolicy
# ---------------------------------------------------------------------------


class TestRetryPolicy:
    def test_defaults(self) -> None:
        rp = RetryPolicy()
        assert rp.interval == 3.0
        assert rp.max_retries is None
        assert rp.backoff_multiplier == 1.0
        assert rp.max_delay == 60.0
        assert rp.jitter is False
        assert rp.on_retry is None

    def test_custom_values(self) -> None:
        rp = RetryPolicy(interval=0.5, max_retries=5)
        assert rp.interval == 0.5
        assert rp.max_retries == 5

    def test_frozen(self) -> None:
        rp = RetryPolicy()
        with pytest.raises(AttributeError):
            rp.interval = 10.0  # type: ignore[misc]

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(interval=-1.0)

    def test_negative_max_retries_rejected(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)

    def test_on_retry_not_compared(self) -> None:
        assert RetryPolicy(on_retry=lambda *a: None) == RetryPolicy()


# ---------------------------------------------------------------------------
# TransportTimeout / ClientConfig
# ---------------------------------------------------------------------------


class TestTransportTimeout:
    def test_defaults(self) -> None:
        t = TransportTimeout()
        assert t.connect == 5.0
        assert t.read is None


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig()
        assert config.retry == RetryPolicy()
        assert config.timeout == TransportTimeout()
        assert config.headers == {}
        assert config.last_event_id is None

    def test_from_env_empty(self) -> None:
        config = ClientConfig.from_env({})
        assert config == ClientConfig()

    def test_from_env_values(self) -> None:
        config = ClientConfig.from_env(
            {
                "EVENTSOURCE_RETRY_MS": "1500",
                "EVENTSOURCE_MAX_RETRIES": "4",
                "EVENTSOURCE_CONNECT_TIMEOUT": "2.5",
                "EVENTSOURCE_READ_TIMEOUT": "30",
                "EVENTSOURCE_LAST_EVENT_ID": "abc",
            }
        )
        assert config.retry.interval == 1.5
        assert config.retry.max_retries == 4
        assert config.timeout.connect == 2.5
        assert config.timeout.read == 30.0
        assert config.last_event_id == "abc"

    def test_from_env_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EVENTSOURCE_RETRY_MS", "250")
        assert ClientConfig.from_env().retry.interval == 0.25


# ---------------------------------------------------------------------------
# AbortController / AbortSignal
# ---------------------------------------------------------------------------


class TestAbort:
    def test_signal_initially_not_aborted(self) -> None:
        assert AbortSignal().aborted is False

    def test_abort_sets_signal(self) -> None:
        controller = AbortController()
        controller.abort()
        assert controller.signal.aborted is True

    def test_listeners_called_once(self) -> None:
        controller = AbortController()
        calls: list[int] = []
        controller.signal.add_listener(lambda: calls.append(1))
        controller.abort()
        controller.abort()
        assert calls == [1]

    def test_listener_added_after_abort_runs_immediately(self) -> None:
        controller = AbortController()
        controller.abort()
        calls: list[int] = []
        controller.signal.add_listener(lambda: calls.append(1))
        assert calls == [1]

    def test_remove_listener(self) -> None:
        controller = AbortController()
        calls: list[int] = []

        def listener() -> None:
            calls.append(1)

        controller.signal.add_listener(listener)
        controller.signal.remove_listener(listener)
        controller.signal.remove_listener(listener)
        controller.abort()
        assert calls == []

    def test_wait_returns_false_on_timeout(self) -> None:
        assert AbortSignal().wait(0.01) is False


# ---------------------------------------------------------------------------
# ConnectionState / ServerSentEvent / NotificationKind
# ---------------------------------------------------------------------------


class TestConnectionState:
    def test_defaults(self) -> None:
        state = ConnectionState()
        assert state.running is False
        assert state.last_event_id is None
        assert state.retry_interval == 3.0
        assert state.retry_count == 0
        assert state.max_retries is None

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            ConnectionState(retry_interval=-0.1)


class TestServerSentEvent:
    def test_defaults(self) -> None:
        event = ServerSentEvent()
        assert event.id is None
        assert event.event == "message"
        assert event.data == ""

    def test_frozen(self) -> None:
        event = ServerSentEvent(data="x")
        with pytest.raises(AttributeError):
            event.data = "y"  # type: ignore[misc]


def test_notification_kind_values() -> None:
    assert NotificationKind.CONNECTED == "connected"
    assert NotificationKind.DISCONNECTED == "disconnected"
    assert NotificationKind.ERROR == "error"
    assert NotificationKind.MESSAGE == "message"

"""Tests for the eventsource CLI."""
from __future__ import annotations

import json
from collections.abc import Iterator
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from eventsource import __version__
from eventsource.cli.main import cli
from eventsource.client import EventSourceClient
from eventsource.types.config import ClientConfig

URL = "https://stream.test/events"


def _ticks() -> Iterator[bytes]:
    n = 0
    while True:
        n += 1
        yield f"id: {n}\nevent: tick\ndata: {n}\n\n".encode()


class _Server:
    def __init__(self, handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self.configs: list[ClientConfig] = []

    def make_client(self, config: ClientConfig) -> EventSourceClient:
        self.configs.append(config)

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.handler(request)

        return EventSourceClient(
            config, http_client=httpx.Client(transport=httpx.MockTransport(record))
        )


@pytest.fixture
def ticking_server() -> Iterator[_Server]:
    server = _Server(lambda request: httpx.Response(200, content=_ticks()))
    with patch("eventsource.cli.main._make_client", side_effect=server.make_client):
        yield server


@pytest.fixture
def dead_server() -> Iterator[_Server]:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused")

    server = _Server(refuse)
    with patch("eventsource.cli.main._make_client", side_effect=server.make_client):
        yield server


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_help(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Server-Sent Events client" in result.output
        assert "tail" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_tail_help_shows_options(self) -> None:
        result = CliRunner().invoke(cli, ["tail", "--help"])
        assert result.exit_code == 0
        for option in ("--retry-ms", "--max-retries", "--last-event-id", "--header", "--limit", "--json"):
            assert option in result.output


# ---------------------------------------------------------------------------
# tail command
# ---------------------------------------------------------------------------


class TestTail:
    def test_prints_events(self, ticking_server: _Server) -> None:
        result = CliRunner().invoke(cli, ["tail", URL, "--limit", "2"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["[1] tick: 1", "[2] tick: 2"]

    def test_json_output(self, ticking_server: _Server) -> None:
        result = CliRunner().invoke(cli, ["tail", URL, "--limit", "1", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": "1", "event": "tick", "data": "1"}

    def test_options_build_config(self, ticking_server: _Server) -> None:
        result = CliRunner().invoke(
            cli,
            [
                "tail",
                URL,
                "--limit",
                "1",
                "--retry-ms",
                "1500",
                "--max-retries",
                "4",
                "--last-event-id",
                "abc",
                "-H",
                "X-Token: secret",
            ],
        )
        assert result.exit_code == 0
        config = ticking_server.configs[0]
        assert config.retry.interval == 1.5
        assert config.retry.max_retries == 4
        assert config.last_event_id == "abc"

        request = ticking_server.requests[0]
        assert request.headers["last-event-id"] == "abc"
        assert request.headers["x-token"] == "secret"

    def test_bad_header_rejected(self, ticking_server: _Server) -> None:
        result = CliRunner().invoke(cli, ["tail", URL, "-H", "no-colon"])
        assert result.exit_code == 2
        assert ticking_server.requests == []

    def test_exhausted_retries_exit_nonzero(self, dead_server: _Server) -> None:
        result = CliRunner().invoke(
            cli, ["tail", URL, "--retry-ms", "0", "--max-retries", "2"]
        )
        assert result.exit_code == 1
        assert "Gave up" in result.output
        assert len(dead_server.requests) == 2

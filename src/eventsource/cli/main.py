"""eventsource CLI entry point: Click group with the ``tail`` command."""
from __future__ import annotations

import json
import logging
import sys

import click

from eventsource import __version__
from eventsource.client import EventSourceClient
from eventsource.errors import RetriesExhaustedError
from eventsource.types.config import ClientConfig, RetryPolicy
from eventsource.types.event import ServerSentEvent


@click.group()
@click.version_option(version=__version__, prog_name="eventsource")
def cli() -> None:
    """eventsource - Server-Sent Events client."""


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {raw!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _make_client(config: ClientConfig) -> EventSourceClient:
    return EventSourceClient(config)


def _format_event(event: ServerSentEvent, as_json: bool) -> str:
    if as_json:
        return json.dumps({"id": event.id, "event": event.event, "data": event.data})
    prefix = f"[{event.id}] " if event.id is not None else ""
    return f"{prefix}{event.event}: {event.data}"


@cli.command()
@click.argument("url")
@click.option("--retry-ms", type=int, default=None, help="Initial reconnect interval in milliseconds")
@click.option("--max-retries", type=int, default=None, help="Give up after this many failed attempts")
@click.option("--last-event-id", default=None, help="Resume from this event id")
@click.option("--header", "-H", "headers", multiple=True, help="Extra request header as 'Name: value'")
@click.option("--limit", type=int, default=None, help="Disconnect after this many events")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print events as JSON lines")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def tail(
    url: str,
    retry_ms: int | None,
    max_retries: int | None,
    last_event_id: str | None,
    headers: tuple[str, ...],
    limit: int | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Connect to an event stream URL and print events as they arrive."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    env_config = ClientConfig.from_env()
    config = ClientConfig(
        retry=RetryPolicy(
            interval=retry_ms / 1000.0 if retry_ms is not None else env_config.retry.interval,
            max_retries=max_retries if max_retries is not None else env_config.retry.max_retries,
        ),
        timeout=env_config.timeout,
        headers=_parse_headers(headers),
        last_event_id=last_event_id or env_config.last_event_id,
    )

    client = _make_client(config)
    received = 0
    gave_up: list[RetriesExhaustedError] = []

    @client.on_message
    def _print(event: ServerSentEvent) -> None:
        nonlocal received
        click.echo(_format_event(event, as_json))
        received += 1
        if limit is not None and received >= limit:
            client.disconnect()

    @client.on_error
    def _report(error: Exception) -> None:
        if isinstance(error, RetriesExhaustedError):
            gave_up.append(error)
        elif verbose:
            click.echo(f"Error: {error}", err=True)

    try:
        client.connect(url)
    except KeyboardInterrupt:
        client.disconnect()
    finally:
        client.close()

    if gave_up:
        click.echo(f"Error: {gave_up[0]}", err=True)
        sys.exit(1)

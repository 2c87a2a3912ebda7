"""Live change stream command."""

from __future__ import annotations

from typing import Optional

import typer

from firebase_rest.cli.helpers import AUTH_ENV, URL_ENV, console, parse_path, resolve_setting
from firebase_rest.client import ChangeEvent, EventType, streaming_client
from firebase_rest.errors import FirebaseError

POLL_INTERVAL = 0.5


def _print_event(event: ChangeEvent) -> None:
    if event.name == EventType.KEEP_ALIVE:
        console.print("[dim]keep-alive[/dim]")
        return
    console.print(f"[bold cyan]{event.name}[/bold cyan]")
    console.print_json(data=event.data)


def stream_command(path: str, url: str | None, auth: str | None) -> None:
    """Print change events under path until interrupted or disconnected."""
    root_url = resolve_setting(url, URL_ENV, "--url")
    token = resolve_setting(auth, AUTH_ENV, "--auth")
    errors: list[FirebaseError] = []

    stream = streaming_client(root_url, parse_path(path), token)
    stream.on_event(_print_event)
    stream.on_error(errors.append)

    try:
        stream.open()
        console.print(f"Listening on [bold]{path}[/bold] (Ctrl+C to stop)")
        while not stream.wait(timeout=POLL_INTERVAL):
            pass
    except KeyboardInterrupt:
        console.print("\nStopping stream")
    finally:
        stream.close()

    if errors:
        console.print(f"[red]❌ {errors[-1]}[/red]")
        raise typer.Exit(1)


def stream_cmd(
    path: str = typer.Argument("/", help="Slash-separated path, / for the root"),
    url: Optional[str] = typer.Option(None, "--url", help=f"Database URL (default: ${URL_ENV})"),
    auth: Optional[str] = typer.Option(None, "--auth", help=f"Auth token (default: ${AUTH_ENV})"),
) -> None:
    """Print change events under PATH as they happen."""
    stream_command(path, url, auth)

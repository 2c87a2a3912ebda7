"""get/set/push/update commands."""

from __future__ import annotations

from typing import Any, Optional

import typer

from firebase_rest.cli.helpers import AUTH_ENV, URL_ENV, console, fail, parse_json, parse_path, resolve_setting
from firebase_rest.client import rest_client
from firebase_rest.errors import DecodeError, RequestError

URL_OPTION_HELP = f"Database URL (default: ${URL_ENV})"
AUTH_OPTION_HELP = f"Auth token (default: ${AUTH_ENV})"


def run_operation(operation: str, path: str, url: str | None, auth: str | None, value: str | None = None) -> None:
    """Run one REST operation and print the JSON result."""
    root_url = resolve_setting(url, URL_ENV, "--url")
    token = resolve_setting(auth, AUTH_ENV, "--auth")
    segments = parse_path(path)

    args: list[Any] = [segments]
    if value is not None:
        args.append(parse_json(value))

    try:
        with rest_client(root_url, token) as client:
            result = getattr(client, operation)(*args)
    except RequestError as e:
        if e.status_code is not None:
            fail(f"HTTP {e.status_code}: {e.body}")
        fail(f"Network error: {e}")
    except DecodeError as e:
        fail(str(e))

    console.print_json(data=result)


def get_cmd(
    path: str = typer.Argument(..., help="Slash-separated path, / for the root"),
    url: Optional[str] = typer.Option(None, "--url", help=URL_OPTION_HELP),
    auth: Optional[str] = typer.Option(None, "--auth", help=AUTH_OPTION_HELP),
) -> None:
    """Read the value at PATH."""
    run_operation("get", path, url, auth)


def set_cmd(
    path: str = typer.Argument(..., help="Slash-separated path, / for the root"),
    value: str = typer.Argument(..., help="JSON value (null deletes)"),
    url: Optional[str] = typer.Option(None, "--url", help=URL_OPTION_HELP),
    auth: Optional[str] = typer.Option(None, "--auth", help=AUTH_OPTION_HELP),
) -> None:
    """Replace the value at PATH."""
    run_operation("set", path, url, auth, value)


def push_cmd(
    path: str = typer.Argument(..., help="Slash-separated path, / for the root"),
    value: str = typer.Argument(..., help="JSON value for the new child"),
    url: Optional[str] = typer.Option(None, "--url", help=URL_OPTION_HELP),
    auth: Optional[str] = typer.Option(None, "--auth", help=AUTH_OPTION_HELP),
) -> None:
    """Add a child with a generated key under PATH."""
    run_operation("push", path, url, auth, value)


def update_cmd(
    path: str = typer.Argument(..., help="Slash-separated path, / for the root"),
    value: str = typer.Argument(..., help="JSON object of children to merge"),
    url: Optional[str] = typer.Option(None, "--url", help=URL_OPTION_HELP),
    auth: Optional[str] = typer.Option(None, "--auth", help=AUTH_OPTION_HELP),
) -> None:
    """Merge the children in VALUE into PATH."""
    run_operation("update", path, url, auth, value)

"""Shared CLI helpers: console, settings lookup, argument parsing."""

from __future__ import annotations

import json
import os
from typing import Any

import typer
from rich.console import Console

from firebase_rest.paths import decode_path

console = Console()

URL_ENV = "FIREBASE_URL"
SECRET_ENV = "FIREBASE_SECRET"
AUTH_ENV = "FIREBASE_AUTH"


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]❌ {message}[/red]")
    raise typer.Exit(1)


def resolve_setting(value: str | None, env_var: str, flag: str) -> str:
    """
    Return an option value, falling back to an environment variable.

    Exits with status 1 if neither is set.
    """
    resolved = value or os.getenv(env_var, "")
    if not resolved:
        console.print(f"[red]❌ {env_var} environment variable not set[/red]")
        console.print(f"[dim]Pass {flag} or set it in the environment:[/dim]")
        console.print(f"  export {env_var}=...")
        raise typer.Exit(1)
    return resolved


def parse_path(path: str) -> list[str]:
    """Parse a slash-separated CLI path ("/" is the root)."""
    return decode_path(path if path.startswith("/") else f"/{path}")


def parse_json(text: str, what: str = "value") -> Any:
    """Parse a JSON argument, exiting with status 1 on invalid input."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON {what}: {e}")

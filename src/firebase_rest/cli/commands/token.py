"""Token generation command."""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from firebase_rest.auth import MAX_TOKEN_LENGTH, MAX_UID_LENGTH, TokenOptions, create_token, decode_token
from firebase_rest.cli.helpers import SECRET_ENV, console, fail, parse_json, resolve_setting


def token_command(
    uid: str,
    data: str,
    secret: str | None,
    exp: float | None = None,
    nbf: float | None = None,
    admin: bool = False,
    debug: bool = False,
    show: bool = False,
) -> None:
    """Generate a token and print it."""
    claims = parse_json(data, "data")
    if not isinstance(claims, dict):
        fail("--data must be a JSON object")

    signing_secret = resolve_setting(secret, SECRET_ENV, "--secret")
    options = TokenOptions(exp=exp, nbf=nbf, admin=admin, debug=debug)

    token = create_token(uid, claims, signing_secret, options)
    if token is None:
        fail(
            f"Token rejected: uid must be under {MAX_UID_LENGTH} characters "
            f"and the token under {MAX_TOKEN_LENGTH}"
        )

    if show:
        table = Table(title="Token claims")
        table.add_column("Claim")
        table.add_column("Value")
        for claim, value in decode_token(token, signing_secret).items():
            table.add_row(claim, str(value))
        console.print(table)

    # Plain print keeps the token on one line for shell capture
    print(token)


def token_cmd(
    uid: str = typer.Argument(..., help="Unique user id (under 256 characters)"),
    data: str = typer.Option("{}", "--data", help="Extra claims as a JSON object"),
    secret: Optional[str] = typer.Option(None, "--secret", help=f"Signing secret (default: ${SECRET_ENV})"),
    exp: Optional[float] = typer.Option(None, "--exp", help="Hours until the token expires"),
    nbf: Optional[float] = typer.Option(None, "--nbf", help="Hours until the token becomes valid"),
    admin: bool = typer.Option(False, "--admin", help="Grant full read/write access"),
    debug: bool = typer.Option(False, "--debug", help="Enable verbose rule errors"),
    show: bool = typer.Option(False, "--show", help="Also print the decoded claims"),
) -> None:
    """Generate a signed auth token."""
    token_command(uid, data, secret, exp, nbf, admin, debug, show)

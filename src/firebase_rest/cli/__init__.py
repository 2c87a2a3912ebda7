"""firebase-rest command line entry point."""

import typer

from firebase_rest.cli.commands.data import get_cmd, push_cmd, set_cmd, update_cmd
from firebase_rest.cli.commands.stream import stream_cmd
from firebase_rest.cli.commands.token import token_cmd

app = typer.Typer(
    name="firebase-rest",
    help="Generate auth tokens and read, write, or watch a Firebase database over REST.",
    no_args_is_help=True,
)

app.command(name="token")(token_cmd)
app.command(name="get")(get_cmd)
app.command(name="set")(set_cmd)
app.command(name="push")(push_cmd)
app.command(name="update")(update_cmd)
app.command(name="stream")(stream_cmd)


def main() -> None:
    app()

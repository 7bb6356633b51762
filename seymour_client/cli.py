"""
seymour-cli: a simple client for the seymour gemini feed aggregator.

Usage:
    seymour-cli unread [--no-mark-read]
    seymour-cli list-subscriptions
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer

from .config import SeymourConfig, load_config
from .errors import SeymourClientError
from .render import render_entries, render_subscriptions
from .session import fetch_subscriptions, fetch_unread

_T = TypeVar("_T")

app = typer.Typer(
    name="seymour-cli",
    help="A simple client for the seymour gemini feed aggregator",
    no_args_is_help=True,
)


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_error_chain(err: BaseException) -> str:
    """Render an exception and its causes, outermost first."""
    lines = [f"Error: {err}"]
    cause = err.__cause__ or err.__context__
    while cause is not None:
        lines.append(f"  caused by: {cause}")
        cause = cause.__cause__ or cause.__context__
    return "\n".join(lines)


def _load(ctx: typer.Context) -> SeymourConfig:
    config = load_config(ctx.obj["config_file"])
    if ctx.obj["timeout"] is not None:
        config = replace(config, timeout=ctx.obj["timeout"])
    return config


def _run(
    ctx: typer.Context,
    operation: Callable[[SeymourConfig], Coroutine[Any, Any, _T]],
) -> _T:
    """Load config, run one async operation and turn client errors into exit 1."""
    try:
        config = _load(ctx)
        return asyncio.run(operation(config))
    except SeymourClientError as err:
        typer.echo(format_error_chain(err), err=True)
        raise typer.Exit(code=1) from err


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config-file",
        help="Configuration file. ~/.config/seymour-cli/config.yaml if not present.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        min=0.001,
        help="Seconds to wait for the server before giving up.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    A simple client for the seymour gemini feed aggregator.
    """
    configure_logging(verbose)
    ctx.obj = {"config_file": config_file, "timeout": timeout}


@app.command("unread")
def unread(
    ctx: typer.Context,
    no_mark_read: bool = typer.Option(
        False, "--no-mark-read", help="Don't mark entries as read as they're listed"
    ),
):
    """List unread feed entries."""
    mark_read = not no_mark_read
    entries = _run(ctx, lambda config: fetch_unread(config, mark_read=mark_read))
    typer.echo(render_entries(entries, marked_read=mark_read))


def list_subscriptions(ctx: typer.Context):
    """List all subscriptions."""
    subscriptions = _run(ctx, fetch_subscriptions)
    typer.echo(render_subscriptions(subscriptions))


app.command("list-subscriptions")(list_subscriptions)
app.command("subscriptions", hidden=True)(list_subscriptions)


if __name__ == "__main__":
    app()

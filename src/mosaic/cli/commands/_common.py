"""Options and helpers shared by the engine commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

from mosaic.cli.context import CLIContext, CLIInitializer, ExitCode
from mosaic.cli.output import format_error
from mosaic.engine import Engine

__all__ = ["boot_from_context", "module_options"]


def module_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--module`` and ``--tier`` to a command."""
    f = click.option(
        "-m",
        "--module",
        "module_paths",
        multiple=True,
        metavar="PKG.MOD:ATTR",
        help="Register a module before boot (repeatable).",
    )(f)
    f = click.option(
        "--tier",
        type=click.Choice(["presentation", "service"]),
        default=None,
        help="Override the configured engine tier.",
    )(f)
    return f


async def boot_from_context(
    ctx: click.Context, module_paths: tuple[str, ...], tier: str | None
) -> Engine:
    """Boot a fresh engine for one command, exiting on failure."""
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    initializer = CLIInitializer(cli_ctx.config, list(module_paths), tier)  # type: ignore[arg-type]
    try:
        return await initializer.boot()
    except Exception as e:
        click.echo(format_error("Engine boot failed", details=[str(e)]), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

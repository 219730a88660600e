"""CLI entry point for Mosaic.

Diagnostic commands that boot an engine and inspect it.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from mosaic.logging import configure_logging

# Load .env before anything reads MOSAIC_* variables
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from mosaic import __version__  # noqa: E402
from mosaic.cli.commands.modules import modules  # noqa: E402
from mosaic.cli.commands.resolve import resolve  # noqa: E402
from mosaic.cli.commands.snapshot import snapshot  # noqa: E402
from mosaic.cli.context import CLIContext  # noqa: E402
from mosaic.config import load_config  # noqa: E402
from mosaic.exceptions import ConfigError  # noqa: E402

_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mosaic")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides project/user config).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, verbose: int, quiet: bool) -> None:
    """Mosaic - metadata-driven UI composition runtime."""
    ctx.ensure_object(dict)

    config_path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(1)

    ctx.obj["cli_ctx"] = CLIContext(
        config=config, config_path=config_path, verbosity=verbose, quiet=quiet
    )

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = _LEVELS.get(config.logging.level, logging.WARNING)
    configure_logging(force_json=config.logging.json_output, level=level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(snapshot)
cli.add_command(modules)
cli.add_command(resolve)

if __name__ == "__main__":
    cli()

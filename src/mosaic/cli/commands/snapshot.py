"""``mosaic snapshot`` command."""

from __future__ import annotations

import click

from mosaic.cli.commands._common import boot_from_context, module_options
from mosaic.cli.context import async_command


@click.command()
@module_options
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation.")
@click.pass_context
@async_command
async def snapshot(
    ctx: click.Context, module_paths: tuple[str, ...], tier: str | None, indent: int
) -> None:
    """Print the configuration snapshot of a booted engine.

    Examples:
        mosaic snapshot
        mosaic snapshot -m crm.modules:CrmModule --indent 0
    """
    engine = await boot_from_context(ctx, module_paths, tier)
    click.echo(engine.meta_registry.to_json_string(indent=indent or None))

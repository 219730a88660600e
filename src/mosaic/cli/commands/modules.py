"""``mosaic modules`` command."""

from __future__ import annotations

import click
from rich.table import Table

from mosaic.cli.commands._common import boot_from_context, module_options
from mosaic.cli.console import console
from mosaic.cli.context import async_command
from mosaic.cli.output import OutputFormat, format_json


@click.command()
@module_options
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@click.pass_context
@async_command
async def modules(
    ctx: click.Context, module_paths: tuple[str, ...], tier: str | None, fmt: str
) -> None:
    """List the modules of a booted engine in application order.

    Examples:
        mosaic modules
        mosaic modules -m crm.modules:CrmModule --format json
    """
    engine = await boot_from_context(ctx, module_paths, tier)
    infos = [m.info for m in engine.module_registry.modules]

    if fmt == OutputFormat.JSON.value:
        click.echo(format_json([info.to_plain() for info in infos]))
        return

    table = Table(title=f"Modules ({engine.settings.tier} tier)")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Provider")
    table.add_column("Description")
    for info in infos:
        table.add_row(info.name, info.version, info.provider or "", info.description or "")
    console.print(table)

"""``mosaic resolve`` command.

Resolve one wire-format action against a booted engine and print the result.
"""

from __future__ import annotations

import json

import click
from pydantic import ValidationError

from mosaic.cli.commands._common import boot_from_context, module_options
from mosaic.cli.console import console
from mosaic.cli.context import ExitCode, async_command
from mosaic.cli.output import OutputFormat, format_error, format_json
from mosaic.routing import (
    Action,
    ComponentResolution,
    ContainerScope,
    DefaultResolution,
    Diagnostic,
    HiddenResolution,
    Resolution,
    ViewResolution,
)


def describe_resolution(resolution: Resolution) -> dict[str, object]:
    """Plain summary of a resolution for display."""
    if isinstance(resolution, ViewResolution):
        return {
            "kind": "view",
            "modelName": resolution.model_name,
            "viewType": resolution.view_type,
            "viewName": resolution.view.name,
            "component": resolution.component.info.name,
            "baseObjectId": resolution.base_object_id,
            "behavior": resolution.behavior.to_plain(),
            "reference": resolution.reference.to_plain() if resolution.reference else None,
            "opensScope": resolution.opens_scope,
        }
    if isinstance(resolution, ComponentResolution):
        return {"kind": "component", "name": resolution.name}
    if isinstance(resolution, HiddenResolution):
        return {"kind": "hidden"}
    if isinstance(resolution, Diagnostic):
        return {
            "kind": "diagnostic",
            "message": resolution.message,
            "missing": resolution.error.missing,
        }
    if isinstance(resolution, DefaultResolution):
        return {"kind": "default"}
    raise TypeError(f"Unsupported resolution: {type(resolution).__name__}")


@click.command()
@click.argument("action_json")
@module_options
@click.option("--model", "model_name", default=None, help="Model of the hosting container.")
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
async def resolve(
    ctx: click.Context,
    action_json: str,
    module_paths: tuple[str, ...],
    tier: str | None,
    model_name: str | None,
    fmt: str,
) -> None:
    """Resolve an action against a booted engine.

    ACTION_JSON uses the wire shape {actionType, payload, contextObject?, target?}.
    Exits with status 1 when the action resolves to a diagnostic.

    Examples:
        mosaic resolve '{"actionType": "view", "payload": {"modelName": "ee-base-user", "viewType": "grid"}}'
    """
    try:
        action = Action.model_validate(json.loads(action_json))
    except (json.JSONDecodeError, ValidationError) as e:
        click.echo(format_error("Invalid action", details=[str(e)]), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    engine = await boot_from_context(ctx, module_paths, tier)
    resolution = await engine.resolver().resolve(
        action, scope=ContainerScope(model_name=model_name), model_name=model_name
    )
    summary = describe_resolution(resolution)

    if fmt == OutputFormat.JSON.value:
        click.echo(format_json(summary))
    else:
        for key, value in summary.items():
            console.print(f"[bold]{key}[/bold]: {value}")

    if isinstance(resolution, Diagnostic):
        raise SystemExit(ExitCode.FAILURE)

"""Portable JSON form of the meta registry contents."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from mosaic.logging import get_logger
from mosaic.meta.types import ConfigSnapshot, EntityModel, EntityView

__all__ = [
    "canonical_json",
    "dump_snapshot",
    "load_snapshot",
    "snapshot_to_plain",
]

logger = get_logger(__name__)


def canonical_json(value: Any) -> str:
    """Stable serialization used for value comparison and cache keys."""
    return json.dumps(
        value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )


def _view_sort_key(view: EntityView) -> tuple[str, str, str]:
    return (view.model_name, view.view_type, view.name or "")


def snapshot_to_plain(snapshot: ConfigSnapshot) -> dict[str, Any]:
    """Plain camelCase dict with models and views in a stable order."""
    return {
        "models": [m.to_plain() for m in sorted(snapshot.models, key=lambda m: m.name)],
        "views": [v.to_plain() for v in sorted(snapshot.views, key=_view_sort_key)],
    }


def dump_snapshot(snapshot: ConfigSnapshot, indent: int | None = None) -> str:
    if indent is None:
        return canonical_json(snapshot_to_plain(snapshot))
    return json.dumps(snapshot_to_plain(snapshot), indent=indent, ensure_ascii=False)


def load_snapshot(source: str | dict[str, Any]) -> ConfigSnapshot:
    """Parse a snapshot leniently.

    Entries that fail validation are skipped with a warning so a single bad
    definition does not discard the rest of the document.

    Raises:
        ValueError: If ``source`` is not JSON or not an object.
    """
    data = json.loads(source) if isinstance(source, str) else source
    if not isinstance(data, dict):
        raise ValueError("Configuration snapshot must be a JSON object")

    models: list[EntityModel] = []
    for index, raw in enumerate(data.get("models") or []):
        try:
            models.append(EntityModel.model_validate(raw))
        except ValidationError as e:
            logger.warning("snapshot_model_invalid", index=index, error=str(e))

    views: list[EntityView] = []
    for index, raw in enumerate(data.get("views") or []):
        try:
            views.append(EntityView.model_validate(raw))
        except ValidationError as e:
            logger.warning("snapshot_view_invalid", index=index, error=str(e))

    return ConfigSnapshot(models=models, views=views)

"""Server-side action handlers and raw request handlers."""

from __future__ import annotations

from mosaic.actions.registry import ActionRegistry
from mosaic.actions.types import ActionHandler, ActionResult, EntityAction, RequestHandler

__all__ = [
    "ActionHandler",
    "ActionRegistry",
    "ActionResult",
    "EntityAction",
    "RequestHandler",
]

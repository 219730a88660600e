"""Action routing for nested master-detail containers."""

from __future__ import annotations

from mosaic.routing.resolver import ActionResolver, new_object_id
from mosaic.routing.scope import ContainerScope
from mosaic.routing.types import (
    Action,
    ActionType,
    BroadcastData,
    BroadcastKind,
    ComponentResolution,
    ContextObject,
    DefaultResolution,
    Diagnostic,
    HiddenResolution,
    ReferenceScope,
    Resolution,
    ViewResolution,
)

__all__ = [
    "Action",
    "ActionResolver",
    "ActionType",
    "BroadcastData",
    "BroadcastKind",
    "ComponentResolution",
    "ContainerScope",
    "ContextObject",
    "DefaultResolution",
    "Diagnostic",
    "HiddenResolution",
    "ReferenceScope",
    "Resolution",
    "ViewResolution",
    "new_object_id",
]

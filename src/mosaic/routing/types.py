"""Actions and the resolutions the routing engine turns them into."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field

from mosaic.components.types import NamedRenderer, ViewBehavior, ViewComponent
from mosaic.constants import TARGET_SELF
from mosaic.datasource.query import ReferenceScope
from mosaic.meta.delegates import ModelDelegate, ViewDelegate
from mosaic.meta.types import CamelModel

if TYPE_CHECKING:
    from mosaic.exceptions import ConfigurationError

__all__ = [
    "Action",
    "ActionType",
    "BroadcastData",
    "BroadcastKind",
    "ComponentResolution",
    "ContextObject",
    "DefaultResolution",
    "Diagnostic",
    "HiddenResolution",
    "ReferenceScope",
    "Resolution",
    "ViewResolution",
]

ActionType = Literal["view", "comp", "reference-view", "hidden"]

BroadcastKind = Literal["created", "updated", "deleted"]


class ContextObject(CamelModel):
    """The object an action is about."""

    id: str
    model_name: str | None = None


class Action(CamelModel):
    """Declarative navigation instruction.

    Wire shape: ``{actionType, payload, contextObject?, target?}``.
    ``action_type`` is kept open so unknown types fall through to the
    container's default content.
    """

    action_type: str
    payload: dict[str, Any] = Field(default_factory=dict)
    context_object: ContextObject | None = None
    target: str | None = None

    def with_target(self, target: str | None) -> Action:
        return self.model_copy(update={"target": target})

    def retargeted_to_self(self) -> Action:
        return self.with_target(TARGET_SELF)


@dataclass(frozen=True, slots=True)
class BroadcastData:
    kind: BroadcastKind
    payload: Any
    timestamp: float = field(default_factory=time.time)


# =============================================================================
# Resolutions
# =============================================================================


@dataclass(frozen=True, slots=True)
class ViewResolution:
    """Render ``component`` for ``view`` of ``model``.

    Attributes:
        base_object_id: Object the view addresses ("" or ``None`` for none).
        opens_scope: Whether the rendered view gets its own routing scope.
    """

    model: ModelDelegate
    view: ViewDelegate
    component: ViewComponent
    behavior: ViewBehavior
    base_object_id: str | None = None
    reference: ReferenceScope | None = None
    opens_scope: bool = True

    @property
    def model_name(self) -> str:
        return self.model.name

    @property
    def view_type(self) -> str:
        return self.view.view_type


@dataclass(frozen=True, slots=True)
class ComponentResolution:
    """Render a named custom component."""

    renderer: NamedRenderer

    @property
    def name(self) -> str:
        return self.renderer.name


@dataclass(frozen=True, slots=True)
class HiddenResolution:
    """Render nothing while keeping the slot in place."""


@dataclass(frozen=True, slots=True)
class DefaultResolution:
    """Render the container's own default content."""

    default: Any = None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Inline placeholder for a configuration problem."""

    error: ConfigurationError

    @property
    def message(self) -> str:
        return self.error.message


Resolution = (
    ViewResolution | ComponentResolution | HiddenResolution | DefaultResolution | Diagnostic
)

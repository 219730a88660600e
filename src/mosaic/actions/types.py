"""Action and request handler contracts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from mosaic.servlets.types import HttpResponse, ServletRequest

if TYPE_CHECKING:
    from mosaic.engine.engine import Engine

__all__ = [
    "ActionHandler",
    "ActionResult",
    "EntityAction",
    "RequestHandler",
]


@dataclass(frozen=True, slots=True)
class EntityAction:
    """A named server-side action, optionally scoped to a model or object."""

    name: str
    model_name: str | None = None
    object_id: str | None = None
    parameter: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of an action handler.

    Attributes:
        success: Whether the action completed.
        message: Human-readable outcome, set on failure.
        payload_type: Kind of ``data`` (``"error"`` on failure).
        data: Handler-specific result.
    """

    success: bool
    message: str | None = None
    payload_type: str = "result"
    data: Any = None

    @classmethod
    def failure(cls, message: str) -> ActionResult:
        return cls(success=False, message=message, payload_type="error")


@runtime_checkable
class ActionHandler(Protocol):
    """Handles every action whose name is in ``action_names``."""

    action_names: Sequence[str]

    async def handle(self, action: EntityAction, engine: Engine) -> ActionResult: ...


@runtime_checkable
class RequestHandler(Protocol):
    """Raw request handler keyed by the path prefix it serves."""

    path_start_with: str

    async def handle(self, request: ServletRequest) -> HttpResponse: ...

"""Event types delivered through the dispatch chain."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mosaic.events.chain import NextDispatcher


@dataclass(frozen=True, slots=True)
class EntityEvent:
    """A named occurrence, optionally scoped to one model or object.

    Attributes:
        name: Event name listeners are registered under (e.g. "config.updated").
        model_name: Model the event concerns, if any.
        object_id: Entity object the event concerns, if any.
        parameter: Free-form payload.
        timestamp: When the event was created (epoch seconds).
    """

    name: str
    model_name: str | None = None
    object_id: str | None = None
    parameter: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


#: ``async (event, next)``; call ``next.dispatch()`` to let the chain continue
EventListener = Callable[[EntityEvent, "NextDispatcher"], Awaitable[None] | None]

"""Event registry and ordered, fault-tolerant dispatch."""

from __future__ import annotations

from mosaic.events.chain import DispatchChain, NextDispatcher
from mosaic.events.registry import EventRegistry
from mosaic.events.types import EntityEvent, EventListener

__all__ = [
    "DispatchChain",
    "EntityEvent",
    "EventListener",
    "EventRegistry",
    "NextDispatcher",
]

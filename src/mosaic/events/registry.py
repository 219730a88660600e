"""Name-keyed registry of event listeners."""

from __future__ import annotations

import asyncio

from mosaic.events.chain import DispatchChain
from mosaic.events.types import EntityEvent, EventListener
from mosaic.logging import get_logger

__all__ = ["EventRegistry"]

logger = get_logger(__name__)


class EventRegistry:
    """Registry mapping event names to ordered listener lists.

    ``emit`` is fire-and-forget: on a running event loop the chain is
    scheduled as a task and ``emit`` returns immediately. Callers that need
    completion use :meth:`emit_and_wait`.

    Example:
        ```python
        events = EventRegistry()

        async def on_updated(event, next):
            print(event.parameter)
            next.dispatch()

        events.register_listener("config.updated", on_updated)
        await events.emit_and_wait(EntityEvent(name="config.updated"))
        ```
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventListener]] = {}
        self._pending: set[asyncio.Task[int]] = set()

    def register_listener(self, name: str, listener: EventListener) -> None:
        self._listeners.setdefault(name, []).append(listener)
        logger.debug("event_listener_registered", event=name)

    def unregister_listener(self, name: str, listener: EventListener) -> None:
        """Remove ``listener`` (matched by identity) from ``name``'s list."""
        listeners = self._listeners.get(name)
        if not listeners:
            return
        self._listeners[name] = [item for item in listeners if item is not listener]
        if not self._listeners[name]:
            del self._listeners[name]

    def get_listeners(self, name: str) -> list[EventListener]:
        return list(self._listeners.get(name, ()))

    def list_names(self) -> list[str]:
        return sorted(self._listeners)

    def emit(self, event: EntityEvent) -> asyncio.Task[int] | None:
        """Dispatch ``event`` without waiting for listeners.

        Returns:
            The scheduled task when called inside a running loop, otherwise
            ``None`` after the chain has run to completion.
        """
        chain = DispatchChain(event, self.get_listeners(event.name))
        if not len(chain):
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(chain.dispatch())
            return None

        task = loop.create_task(chain.dispatch(), name=f"emit:{event.name}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def emit_and_wait(self, event: EntityEvent) -> int:
        """Dispatch ``event`` and wait for the chain to finish.

        Returns:
            Number of listeners invoked.
        """
        return await DispatchChain(event, self.get_listeners(event.name)).dispatch()

    async def drain(self) -> None:
        """Wait for every chain scheduled by :meth:`emit` to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

"""Middleware-style dispatch over a snapshot of event listeners."""

from __future__ import annotations

import inspect
from collections.abc import Sequence

from mosaic.events.types import EntityEvent, EventListener
from mosaic.exceptions import ListenerError
from mosaic.logging import get_logger

__all__ = ["DispatchChain", "NextDispatcher"]

logger = get_logger(__name__)


class NextDispatcher:
    """Continuation handle passed to each listener.

    A listener lets the chain proceed by calling :meth:`dispatch` (or the
    handle itself). Returning without calling it stops the chain.
    """

    __slots__ = ("_called",)

    def __init__(self) -> None:
        self._called = False

    @property
    def called(self) -> bool:
        return self._called

    def dispatch(self) -> None:
        self._called = True

    __call__ = dispatch


class DispatchChain:
    """Runs listeners for one emission strictly in order.

    The listener list is snapshotted at construction, so listeners added or
    removed while the chain runs do not affect it. A failing listener is
    logged and the chain advances to the next one as if it had continued.

    Example:
        ```python
        chain = DispatchChain(event, registry.get_listeners(event.name))
        invoked = await chain.dispatch()
        ```
    """

    def __init__(self, event: EntityEvent, listeners: Sequence[EventListener]) -> None:
        self.event = event
        self._listeners: tuple[EventListener, ...] = tuple(listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    async def dispatch(self) -> int:
        """Run the chain.

        Returns:
            Number of listeners that were invoked.
        """
        invoked = 0
        index = 0
        while index < len(self._listeners):
            listener = self._listeners[index]
            next_dispatcher = NextDispatcher()
            invoked += 1
            try:
                result = listener(self.event, next_dispatcher)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                error = ListenerError(self.event.name, index, e)
                logger.exception(
                    "event_listener_failed",
                    event=self.event.name,
                    index=index,
                    error=error.message,
                )
                index += 1
                continue

            if not next_dispatcher.called:
                logger.debug(
                    "event_chain_stopped", event=self.event.name, index=index
                )
                break
            index += 1
        return invoked

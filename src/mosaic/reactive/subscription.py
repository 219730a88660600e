"""Reactive subscription over one asynchronous data operation."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from pydantic_core import to_jsonable_python

from mosaic.exceptions import DataFetchError, MosaicError
from mosaic.logging import get_logger
from mosaic.meta.serializer import canonical_json

__all__ = ["DataSubscription", "SubscriptionState", "StateListener", "input_key"]

logger = get_logger(__name__)

StateListener = Callable[["SubscriptionState"], None]


def input_key(value: Any) -> str:
    """Stable serialization of an operation input (models included)."""
    return canonical_json(to_jsonable_python(value, fallback=str))


@dataclass(frozen=True, slots=True)
class SubscriptionState:
    """Observable state of a :class:`DataSubscription`.

    Attributes:
        data: Latest committed result (after ``select``), or ``None``.
        loading: A fetch is in flight and there is no data to show.
        is_fetching: A fetch is in flight.
        error: Failure of the latest committed fetch.
        is_previous_data: ``data`` belongs to a previous input.
    """

    data: Any = None
    loading: bool = False
    is_fetching: bool = False
    error: MosaicError | None = None
    is_previous_data: bool = False


class _Liveness:
    __slots__ = ("alive",)

    def __init__(self) -> None:
        self.alive = True


class DataSubscription:
    """Uniform fetch state machine bound to one operation.

    A fetch runs when the subscription starts, when the canonical form of
    its input changes, and on :meth:`refetch`, but only while enabled.
    Each fetch holds a liveness token; starting a newer fetch or closing
    the subscription revokes it, and a revoked fetch never commits. The
    underlying call itself is not cancelled.

    Example:
        ```python
        sub = hooks["find_many"]({"model_name": "customer"}, keep_previous_data=True)
        sub.subscribe(lambda state: print(state.data))
        await sub.start().wait()
        sub.set_input({"model_name": "customer", "query": {"pageIndex": 2}})
        ```
    """

    def __init__(
        self,
        name: str,
        operation: Callable[..., Awaitable[Any]],
        input: Any = None,
        *,
        enabled: bool = True,
        select: Callable[[Any], Any] | None = None,
        keep_previous_data: bool = False,
    ) -> None:
        self.name = name
        self._operation = operation
        self._input = input
        self._input_key = input_key(input)
        self._enabled = enabled
        self._select = select
        self._keep_previous_data = keep_previous_data
        self._state = SubscriptionState()
        self._listeners: list[StateListener] = []
        self._token: _Liveness | None = None
        self._task: asyncio.Task[None] | None = None
        self._fetched_key: str | None = None
        self._invalidations = 0
        self._started = False
        self._closed = False

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def input(self) -> Any:
        return self._input

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def invalidations(self) -> int:
        return self._invalidations

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` on every state change; returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    def start(self) -> DataSubscription:
        """Begin observing; fetches immediately when enabled."""
        self._started = True
        if self._enabled and not self._closed:
            self._fetch(input_changed=True)
        return self

    def set_input(self, input: Any) -> None:
        key = input_key(input)
        self._input = input
        if key == self._input_key:
            return
        self._input_key = key
        if self._started and self._enabled and not self._closed:
            self._fetch(input_changed=True)

    def set_enabled(self, enabled: bool) -> None:
        was_enabled = self._enabled
        self._enabled = enabled
        if (
            enabled
            and not was_enabled
            and self._started
            and not self._closed
            and self._fetched_key != self._input_key
        ):
            self._fetch(input_changed=True)

    def refetch(self) -> asyncio.Task[None] | None:
        """Invalidate the current result and fetch again.

        Returns:
            The fetch task, or ``None`` when disabled or closed.
        """
        self._invalidations += 1
        if not self._enabled or self._closed:
            return None
        self._started = True
        return self._fetch(input_changed=False)

    async def wait(self) -> SubscriptionState:
        """Wait for the in-flight fetch (if any) and return the state."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)
        return self._state

    def close(self) -> None:
        """Stop committing results and drop every listener."""
        self._closed = True
        if self._token is not None:
            self._token.alive = False
        self._listeners.clear()

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    def _fetch(self, *, input_changed: bool) -> asyncio.Task[None]:
        if self._token is not None:
            self._token.alive = False
        token = _Liveness()
        self._token = token

        previous = self._state.data
        has_data = previous is not None and self._state.error is None
        if input_changed and self._fetched_key is not None:
            if self._keep_previous_data and has_data:
                self._set_state(is_fetching=True, loading=False, is_previous_data=True)
            else:
                self._set_state(
                    data=None, is_fetching=True, loading=True, is_previous_data=False
                )
        else:
            self._set_state(is_fetching=True, loading=previous is None)

        key = self._input_key
        task = asyncio.get_running_loop().create_task(
            self._run(token, key, self._input), name=f"fetch:{self.name}"
        )
        self._task = task
        return task

    async def _call(self, input: Any) -> Any:
        if input is None:
            return await self._operation()
        if isinstance(input, Mapping):
            return await self._operation(**input)
        return await self._operation(input)

    async def _run(self, token: _Liveness, key: str, input: Any) -> None:
        try:
            result = await self._call(input)
            if token.alive and self._select is not None:
                result = self._select(result)
        except Exception as e:
            if not token.alive:
                logger.debug("data_fetch_discarded", operation=self.name)
                return
            self._fail(key, e)
            return

        if not token.alive:
            logger.debug("data_fetch_discarded", operation=self.name)
            return
        self._fetched_key = key
        self._set_state(
            data=result,
            error=None,
            loading=False,
            is_fetching=False,
            is_previous_data=False,
        )

    def _fail(self, key: str, e: Exception) -> None:
        error = e if isinstance(e, MosaicError) else DataFetchError(self.name, e)
        logger.warning("data_fetch_failed", operation=self.name, error=str(e))
        self._fetched_key = key
        if self._keep_previous_data:
            self._set_state(error=error, loading=False, is_fetching=False)
        else:
            self._set_state(
                data=None,
                error=error,
                loading=False,
                is_fetching=False,
                is_previous_data=False,
            )

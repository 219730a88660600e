"""Lock-guarded, one-shot engine construction."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from mosaic.engine.boot import EngineInitializer, boot_engine
from mosaic.engine.engine import Engine
from mosaic.exceptions import EngineNotInitializedError
from mosaic.logging import get_logger

__all__ = ["EngineProvider", "get_engine", "reset_engine"]

logger = get_logger(__name__)

EngineFactory = Callable[[], Engine]


class EngineProvider:
    """Boots an engine once and hands the same instance to every caller.

    The first caller supplies an initializer; concurrent callers wait on
    the lock and receive the identical engine. A failed boot propagates
    its exception and leaves the provider empty, so a later call may
    retry.

    Example:
        ```python
        provider = EngineProvider()
        engine = await provider.get_engine(MyInitializer())
        assert await provider.get_engine() is engine
        ```
    """

    def __init__(self, factory: EngineFactory | None = None) -> None:
        self._factory = factory or Engine
        self._engine: Engine | None = None
        self._lock: asyncio.Lock | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def get_engine(self, initializer: EngineInitializer | None = None) -> Engine:
        """Return the engine, booting it with ``initializer`` on first use.

        Raises:
            EngineNotInitializedError: No engine exists and no initializer
                was given.
        """
        if self._engine is not None:
            return self._engine
        async with self._get_lock():
            if self._engine is not None:
                return self._engine
            if initializer is None:
                raise EngineNotInitializedError()
            engine = self._factory()
            await boot_engine(engine, initializer)
            self._engine = engine
            return engine

    def reset(self) -> None:
        self._engine = None
        self._lock = None


_default_provider = EngineProvider()


async def get_engine(initializer: EngineInitializer | None = None) -> Engine:
    """Return the process-wide engine (see :class:`EngineProvider`)."""
    return await _default_provider.get_engine(initializer)


def reset_engine() -> None:
    """Forget the process-wide engine."""
    _default_provider.reset()

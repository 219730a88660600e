"""CLI context, exit codes and the engine initializer built from options."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, TypeVar

from mosaic.config import MosaicConfig
from mosaic.constants import Tier
from mosaic.engine import Engine, EngineProvider, EngineSettings
from mosaic.logging import get_logger

__all__ = [
    "CLIContext",
    "CLIInitializer",
    "ExitCode",
    "async_command",
]

logger = get_logger(__name__)


class ExitCode(IntEnum):
    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and configuration shared by every command.

    Attributes:
        config: Loaded configuration.
        config_path: Path given with ``--config``.
        verbosity: 0 default, 1 INFO, 2+ DEBUG.
        quiet: Only errors are logged.
    """

    config: MosaicConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False


@dataclass(slots=True)
class CLIInitializer:
    """Engine initializer applying configuration and ``--module`` paths."""

    config: MosaicConfig
    module_paths: list[str] = field(default_factory=list)
    tier: Tier | None = None

    async def init(self, engine: Engine) -> None:
        settings = EngineSettings.from_config(self.config.engine)
        if self.tier:
            settings.tier = self.tier
        engine.settings = settings
        for path in self.module_paths:
            if not engine.module_registry.register_module(path):
                logger.warning("cli_module_not_added", path=path)

    async def boot(self) -> Engine:
        return await EngineProvider().get_engine(self)


F = TypeVar("F", bound=Callable[..., Any])


def async_command(f: F) -> F:
    """Run an async Click command with ``asyncio.run()``."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))

    return wrapper  # type: ignore[return-value]

"""Engine assembly, boot sequence and the process-wide engine provider."""

from __future__ import annotations

from mosaic.engine.boot import (
    BootState,
    BootWatcher,
    EngineInitializer,
    apply_module,
    boot_engine,
    sync_config,
)
from mosaic.engine.engine import Engine
from mosaic.engine.provider import EngineProvider, get_engine, reset_engine
from mosaic.engine.settings import EngineSettings

__all__ = [
    "BootState",
    "BootWatcher",
    "Engine",
    "EngineInitializer",
    "EngineProvider",
    "EngineSettings",
    "apply_module",
    "boot_engine",
    "get_engine",
    "reset_engine",
    "sync_config",
]

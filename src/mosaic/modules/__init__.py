"""Engine modules: contribution contract, registry and the built-in module."""

from __future__ import annotations

from mosaic.modules.builtin import BuiltinModule
from mosaic.modules.registry import ModuleRegistry, load_modules
from mosaic.modules.types import (
    ComponentContributions,
    ConfigContributions,
    DataContributions,
    EventHandlerBinding,
    ImportEntity,
    ImportReference,
    Module,
    ModuleInfo,
)

__all__ = [
    "BuiltinModule",
    "ComponentContributions",
    "ConfigContributions",
    "DataContributions",
    "EventHandlerBinding",
    "ImportEntity",
    "ImportReference",
    "Module",
    "ModuleInfo",
    "ModuleRegistry",
    "load_modules",
]

"""Ordered module registry with import-path loading."""

from __future__ import annotations

import importlib
import inspect
from typing import Any

from mosaic.logging import get_logger
from mosaic.modules.types import Module

__all__ = ["ModuleRegistry", "load_modules"]

logger = get_logger(__name__)


def _instantiate(target: Any) -> list[Module]:
    if isinstance(target, Module):
        return [target]
    if inspect.isclass(target) and issubclass(target, Module):
        return [target()]
    if isinstance(target, (list, tuple)):
        return [module for item in target for module in _instantiate(item)]
    raise TypeError(f"{target!r} is not a module, a module class or a list of them")


def load_modules(path: str) -> list[Module]:
    """Load modules from ``"package.module:attribute"``.

    The attribute may hold a module instance, a module class, or a list of
    either. Failures are logged and yield no modules.
    """
    module_path, _, attribute = path.partition(":")
    try:
        target = importlib.import_module(module_path)
        for part in filter(None, attribute.split(".")):
            target = getattr(target, part)
        return _instantiate(target)
    except (ImportError, AttributeError, TypeError) as e:
        logger.error("module_load_failed", path=path, error=str(e))
        return []


class ModuleRegistry:
    """Modules in registration order, unique by ``info.name``."""

    def __init__(self) -> None:
        self._modules: list[Module] = []

    def register_module(self, module: Module | str) -> list[Module]:
        """Register a module instance or an import path.

        Returns:
            The modules actually added (duplicates are ignored).
        """
        candidates = load_modules(module) if isinstance(module, str) else [module]
        added: list[Module] = []
        for candidate in candidates:
            name = candidate.info.name
            if self.get_module(name) is not None:
                logger.debug("module_already_registered", module_name=name)
                continue
            self._modules.append(candidate)
            added.append(candidate)
            logger.debug("module_registered", module_name=name, version=candidate.info.version)
        return added

    def get_module(self, name: str) -> Module | None:
        return next((m for m in self._modules if m.info.name == name), None)

    @property
    def modules(self) -> list[Module]:
        return list(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

"""Mosaic exception hierarchy.

All exceptions can be imported from this package:
    from mosaic.exceptions import MosaicError, RegistrationError
"""

from __future__ import annotations

from mosaic.exceptions.base import MosaicError
from mosaic.exceptions.config import ConfigError
from mosaic.exceptions.engine import (
    EngineError,
    EngineNotInitializedError,
    ModuleApplyError,
    SeedIngestionError,
)
from mosaic.exceptions.registry import (
    ConfigurationError,
    RegistrationError,
    RegistryError,
    RegistrySealedError,
    UnknownOperatorError,
    ValueValidationError,
)
from mosaic.exceptions.runtime import DataFetchError, ListenerError

__all__ = [
    # Base
    "MosaicError",
    # Config
    "ConfigError",
    # Engine
    "EngineError",
    "EngineNotInitializedError",
    "ModuleApplyError",
    "SeedIngestionError",
    # Registry
    "ConfigurationError",
    "RegistrationError",
    "RegistryError",
    "RegistrySealedError",
    "UnknownOperatorError",
    "ValueValidationError",
    # Runtime
    "DataFetchError",
    "ListenerError",
]

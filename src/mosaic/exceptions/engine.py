from __future__ import annotations

from mosaic.exceptions.base import MosaicError


class EngineError(MosaicError):
    """Base exception for engine construction and boot errors."""


class EngineNotInitializedError(EngineError):
    """The engine was requested before any initializer was supplied.

    This is fatal: the process cannot proceed without a booted engine.
    """

    def __init__(self) -> None:
        super().__init__(
            "Engine has not been initialized. An initializer must be provided "
            "on the first call to get_engine()."
        )


class ModuleApplyError(EngineError):
    """A module failed while its contributions were being applied.

    Raised internally during boot and caught per module; it is logged and
    boot continues with the next module.

    Attributes:
        message: Human-readable error message.
        module_name: Name of the failing module.
        phase: Setup phase that failed ("config", "components", "data").
    """

    def __init__(self, module_name: str, phase: str, cause: BaseException) -> None:
        """Initialize the ModuleApplyError.

        Args:
            module_name: Name of the failing module.
            phase: Setup phase that failed.
            cause: Underlying exception.
        """
        self.module_name = module_name
        self.phase = phase
        super().__init__(
            f"Module '{module_name}' failed during {phase} phase: {cause}"
        )


class SeedIngestionError(EngineError):
    """Seed data for one module could not be ingested.

    The data source rolls back the whole module batch before raising.

    Attributes:
        message: Human-readable error message.
        module_name: Module whose seed batch was rolled back.
    """

    def __init__(self, message: str, module_name: str | None = None) -> None:
        """Initialize the SeedIngestionError.

        Args:
            message: Human-readable error message.
            module_name: Module whose seed batch was rolled back.
        """
        self.module_name = module_name
        super().__init__(message)

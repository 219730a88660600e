from __future__ import annotations

from typing import Any

from mosaic.exceptions.base import MosaicError


class ConfigError(MosaicError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when ``mosaic.yaml`` cannot be parsed or a setting fails
    validation (including values supplied through ``MOSAIC_*`` variables).

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional dotted field name that caused the error (e.g., "engine.tier").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError(
            "Invalid configuration: Input should be 'presentation' or 'service'",
            field="engine.tier",
            value="client",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)

from __future__ import annotations


class MosaicError(Exception):
    """Base exception class for all Mosaic-specific errors.

    Everything the runtime raises on purpose derives from this class, so
    hosts can catch Mosaic failures at their boundary while letting system
    exceptions propagate.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            engine = await get_engine(initializer)
        except MosaicError as e:
            logger.error("engine_unavailable", error=e.message)
            raise SystemExit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the MosaicError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)

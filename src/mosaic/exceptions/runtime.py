from __future__ import annotations

from mosaic.exceptions.base import MosaicError


class ListenerError(MosaicError):
    """An event listener raised while a dispatch chain was running.

    Never propagated to the emitter; the chain logs it and moves on.

    Attributes:
        message: Human-readable error message.
        event_name: Name of the event being dispatched.
        index: Position of the failing listener in the chain.
    """

    def __init__(self, event_name: str, index: int, cause: BaseException) -> None:
        """Initialize the ListenerError.

        Args:
            event_name: Name of the event being dispatched.
            index: Position of the failing listener in the chain.
            cause: Underlying exception.
        """
        self.event_name = event_name
        self.index = index
        super().__init__(
            f"Listener #{index} for event '{event_name}' failed: {cause}"
        )


class DataFetchError(MosaicError):
    """A data operation behind a reactive subscription failed.

    Surfaced only through that subscription's ``error`` state.

    Attributes:
        message: Human-readable error message.
        operation: Name of the data source operation.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        """Initialize the DataFetchError.

        Args:
            operation: Name of the data source operation.
            cause: Underlying exception.
        """
        self.operation = operation
        super().__init__(f"Data operation '{operation}' failed: {cause}")

from __future__ import annotations

from mosaic.exceptions.base import MosaicError


class RegistryError(MosaicError):
    """Base exception for meta and component registry errors."""


class RegistrationError(RegistryError):
    """Raised when a definition is structurally unfit for registration.

    Attributes:
        message: Human-readable error message.
        kind: Kind of definition being registered ("model", "view", ...).
    """

    def __init__(self, message: str, kind: str) -> None:
        """Initialize the RegistrationError.

        Args:
            message: Human-readable error message.
            kind: Kind of definition being registered.
        """
        self.kind = kind
        super().__init__(message)


class RegistrySealedError(RegistryError):
    """Raised when a registry is mutated after the engine reached READY.

    Attributes:
        message: Human-readable error message.
        registry: Name of the sealed registry.
        operation: The rejected mutating operation.
    """

    def __init__(self, registry: str, operation: str) -> None:
        """Initialize the RegistrySealedError.

        Args:
            registry: Name of the sealed registry.
            operation: The rejected mutating operation.
        """
        self.registry = registry
        self.operation = operation
        super().__init__(
            f"{registry} is sealed; '{operation}' is only allowed during boot."
        )


class ConfigurationError(RegistryError):
    """A model, view, component or renderer is missing at render time.

    The routing engine never lets this escape: it is converted into an
    inline diagnostic resolution.

    Attributes:
        message: Human-readable error message.
        missing: What was looked up and not found ("view", "model", ...).
    """

    def __init__(self, message: str, missing: str) -> None:
        """Initialize the ConfigurationError.

        Args:
            message: Human-readable error message.
            missing: Kind of definition that was not found.
        """
        self.missing = missing
        super().__init__(message)


class ValueValidationError(RegistryError):
    """Raised when entity values fail the model's generated validator.

    Attributes:
        message: Human-readable error message.
        model_name: Model whose validator rejected the values.
        errors: Pydantic error dictionaries.
    """

    def __init__(
        self, model_name: str, errors: list[dict[str, object]]
    ) -> None:
        """Initialize the ValueValidationError.

        Args:
            model_name: Model whose validator rejected the values.
            errors: Pydantic error dictionaries.
        """
        self.model_name = model_name
        self.errors = errors
        fields = ", ".join(
            ".".join(str(loc) for loc in err.get("loc", ())) for err in errors  # type: ignore[union-attr]
        )
        super().__init__(f"Invalid values for model '{model_name}': {fields}")


class UnknownOperatorError(RegistryError):
    """Raised when a view controller is asked to invoke an unknown operator.

    Attributes:
        message: Human-readable error message.
        operator: The requested operator name.
        available: Operators the controller does support.
    """

    def __init__(self, operator: str, available: list[str]) -> None:
        """Initialize the UnknownOperatorError.

        Args:
            operator: The requested operator name.
            available: Operators the controller does support.
        """
        self.operator = operator
        self.available = available
        super().__init__(
            f"Unknown operator '{operator}'. Available: {', '.join(available) or '(none)'}"
        )

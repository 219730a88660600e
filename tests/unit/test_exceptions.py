"""Unit tests for exception classes.

Tests the exception hierarchy rooted at MosaicError and the attributes
each domain exception carries.
"""

from __future__ import annotations

import pytest

from mosaic.exceptions import (
    ConfigError,
    ConfigurationError,
    DataFetchError,
    EngineError,
    EngineNotInitializedError,
    ListenerError,
    ModuleApplyError,
    MosaicError,
    RegistrationError,
    RegistryError,
    RegistrySealedError,
    SeedIngestionError,
    UnknownOperatorError,
    ValueValidationError,
)


class TestHierarchy:
    """Every exception derives from MosaicError."""

    @pytest.mark.parametrize(
        "error",
        [
            ConfigError("bad config"),
            RegistrationError("no name", kind="model"),
            RegistrySealedError("MetaRegistry", "register_model"),
            ConfigurationError("view missing", missing="view"),
            ModuleApplyError("crm", "config", RuntimeError("boom")),
            SeedIngestionError("rejected"),
            ListenerError("config.updated", 1, ValueError("bad")),
            DataFetchError("find_many", OSError("offline")),
            ValueValidationError("customer", []),
            UnknownOperatorError("form.reset", ["form.submit"]),
            EngineNotInitializedError(),
        ],
    )
    def test_is_mosaic_error(self, error: MosaicError) -> None:
        """Test each exception is a MosaicError with a message."""
        assert isinstance(error, MosaicError)
        assert error.message
        assert str(error) == error.message

    def test_registry_errors_share_base(self) -> None:
        """Test registry-related errors derive from RegistryError."""
        assert issubclass(RegistrationError, RegistryError)
        assert issubclass(RegistrySealedError, RegistryError)
        assert issubclass(UnknownOperatorError, RegistryError)

    def test_engine_errors_share_base(self) -> None:
        """Test engine-related errors derive from EngineError."""
        assert issubclass(EngineNotInitializedError, EngineError)
        assert issubclass(ModuleApplyError, EngineError)
        assert issubclass(SeedIngestionError, EngineError)


class TestConfigError:
    """Tests for ConfigError."""

    def test_field_and_value_default_to_none(self) -> None:
        error = ConfigError("Invalid configuration")

        assert error.field is None
        assert error.value is None

    def test_field_and_value_kept(self) -> None:
        error = ConfigError("Invalid tier", field="engine.tier", value="edge")

        assert error.field == "engine.tier"
        assert error.value == "edge"


class TestAttributes:
    """Tests for the context attributes of domain exceptions."""

    def test_sealed_error_names_registry_and_operation(self) -> None:
        error = RegistrySealedError("ComponentRegistry", "register_view")

        assert "ComponentRegistry" in error.message
        assert "register_view" in error.message

    def test_configuration_error_missing(self) -> None:
        error = ConfigurationError("The model order was not found", missing="model")

        assert error.missing == "model"

    def test_module_apply_error(self) -> None:
        error = ModuleApplyError("crm", "config", RuntimeError("boom"))

        assert error.module_name == "crm"
        assert error.phase == "config"
        assert "boom" in error.message

    def test_listener_error(self) -> None:
        error = ListenerError("config.updated", 2, ValueError("bad"))

        assert error.event_name == "config.updated"
        assert error.index == 2

    def test_data_fetch_error(self) -> None:
        error = DataFetchError("find_many", OSError("offline"))

        assert error.operation == "find_many"
        assert "offline" in error.message

    def test_value_validation_error_lists_fields(self) -> None:
        error = ValueValidationError(
            "customer", [{"loc": ("name",), "msg": "Field required"}]
        )

        assert error.model_name == "customer"
        assert "name" in error.message

    def test_unknown_operator_lists_available(self) -> None:
        error = UnknownOperatorError("form.reset", ["form.submit", "form.values"])

        assert error.operator == "form.reset"
        assert "form.submit" in error.message

    def test_unknown_operator_with_no_operators(self) -> None:
        error = UnknownOperatorError("x", [])

        assert "(none)" in error.message

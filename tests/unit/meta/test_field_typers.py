"""Tests for the built-in field typers."""

from __future__ import annotations

from datetime import datetime

import pytest

from mosaic.meta import EntityField, FieldTyper, FieldTyperRegistry, QueryOperator
from mosaic.meta.fieldtypes import normalize_option


@pytest.fixture
def typers() -> FieldTyperRegistry:
    return FieldTyperRegistry()


class TestFieldTyperRegistry:
    """Tests for typer lookup and replacement."""

    def test_all_builtin_types_registered(self, typers: FieldTyperRegistry) -> None:
        assert set(typers.list_types()) == {
            "string",
            "number",
            "boolean",
            "date",
            "enum",
            "array",
            "one_to_one",
            "many_to_one",
            "one_to_many",
            "many_to_many",
            "binary",
            "json",
        }

    def test_unknown_type(self, typers: FieldTyperRegistry) -> None:
        assert typers.get("geo") is None
        assert not typers.has("geo")

    def test_register_replaces_builtin(self, typers: FieldTyperRegistry) -> None:
        class MarkdownStringTyper(FieldTyper):
            type = "string"
            widget_type = "markdown"

        typers.register(MarkdownStringTyper())

        typer = typers.get("string")
        assert typer is not None
        assert typer.default_widget("form") == "markdown"


class TestDefaults:
    """Tests for structural default values."""

    @pytest.mark.parametrize(
        ("field_type", "expected"),
        [
            ("string", ""),
            ("number", 0),
            ("boolean", False),
            ("array", []),
            ("one_to_one", ""),
            ("many_to_one", ""),
            ("json", {}),
            ("one_to_many", None),
            ("binary", None),
        ],
    )
    def test_structural_default(
        self, typers: FieldTyperRegistry, field_type: str, expected: object
    ) -> None:
        typer = typers.get(field_type)
        assert typer is not None
        assert typer.default_value_for(EntityField(name="f", type=field_type)) == expected  # type: ignore[arg-type]

    def test_date_default_is_now(self, typers: FieldTyperRegistry) -> None:
        typer = typers.get("date")
        assert typer is not None
        assert isinstance(typer.default_value_for(EntityField(name="due", type="date")), datetime)

    def test_enum_default_is_first_option(self, typers: FieldTyperRegistry) -> None:
        typer = typers.get("enum")
        assert typer is not None
        field = EntityField(name="status", type="enum", type_options={"options": ["a", "b"]})

        assert typer.default_value_for(field) == "a"
        assert typer.default_value_for(EntityField(name="status", type="enum")) is None


class TestWidgets:
    @pytest.mark.parametrize(
        ("field_type", "widget"),
        [
            ("string", "textfield"),
            ("number", "number"),
            ("boolean", "switch"),
            ("date", "date"),
            ("enum", "select"),
            ("many_to_one", "select"),
            ("one_to_many", "reference"),
            ("binary", "file"),
            ("json", "json"),
        ],
    )
    def test_default_widget(
        self, typers: FieldTyperRegistry, field_type: str, widget: str
    ) -> None:
        typer = typers.get(field_type)
        assert typer is not None
        assert typer.default_widget("form") == widget


class TestQueryOptions:
    """Tests for operators and options offered to query builders."""

    def test_string_operators(self, typers: FieldTyperRegistry) -> None:
        typer = typers.get("string")
        assert typer is not None
        assert QueryOperator.CONTAINS in typer.operators
        assert QueryOperator.GT not in typer.operators

    def test_boolean_options(self, typers: FieldTyperRegistry) -> None:
        typer = typers.get("boolean")
        assert typer is not None
        options = typer.query_options(EntityField(name="vip", type="boolean"))
        assert [(o.label, o.value) for o in options] == [("Yes", True), ("No", False)]

    def test_enum_options_normalized(self, typers: FieldTyperRegistry) -> None:
        typer = typers.get("enum")
        assert typer is not None
        field = EntityField(
            name="status",
            type="enum",
            type_options={"options": ["lead", {"label": "Active", "value": "active"}, None]},
        )

        options = typer.query_options(field)
        assert [(o.label, o.value) for o in options] == [("lead", "lead"), ("Active", "active")]

    def test_normalize_option(self) -> None:
        assert normalize_option(None) is None
        option = normalize_option(3)
        assert option is not None
        assert option.label == "3"
        assert option.value == 3

"""Field typers: per-type defaults, widgets, validation and query operators.

Each :class:`FieldTyper` knows how one field type behaves:

- the structural default used when supplementing values,
- the widget a view falls back to when an item names none,
- the annotation the generated Pydantic validator uses,
- the query operators offered for searchable fields.

Typers are looked up by type name in a :class:`FieldTyperRegistry`; hosts
may register their own typers (or replace a built-in one) during boot.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from mosaic.logging import get_logger
from mosaic.meta.types import EntityField, QueryOperator, QueryOption

__all__ = [
    "FieldTyper",
    "FieldTyperRegistry",
    "BinaryValue",
    "PartialBinaryValue",
    "normalize_option",
]

logger = get_logger(__name__)

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class BinaryValue(BaseModel):
    """Stored file descriptor held by ``binary`` fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: NonEmptyStr
    file_type: NonEmptyStr
    file_size: Annotated[float, Field(ge=0)]
    file_path: NonEmptyStr


class PartialBinaryValue(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: NonEmptyStr | None = None
    file_type: NonEmptyStr | None = None
    file_size: float | None = None
    file_path: NonEmptyStr | None = None


def normalize_option(item: Any) -> QueryOption | None:
    """Turn a raw enum option (scalar or ``{label, value}``) into a QueryOption."""
    if item is None:
        return None
    if isinstance(item, dict):
        value = item.get("value", item)
        label = item.get("label", str(value))
        return QueryOption(label=str(label), value=value)
    return QueryOption(label=str(item), value=item)


def _option_values(field: EntityField) -> list[Any]:
    return [
        opt["value"] if isinstance(opt, dict) and "value" in opt else opt
        for opt in field.options
    ]


class FieldTyper:
    """Behavior of one field type.

    Subclasses override :meth:`annotation` and, where the type has a
    dynamic default or options, :meth:`default_value_for` and
    :meth:`query_options`.

    Attributes:
        type: Field type name this typer handles.
        title: Display title of the type.
        widget_type: Default widget for items of this type.
        default_value: Structural default used when supplementing values.
        operators: Query operators offered when the field is searchable.
    """

    type: str = "base"
    title: str = "Base"
    description: str = ""
    widget_type: str = "none"
    default_value: Any = None
    operators: tuple[QueryOperator, ...] = ()

    def default_value_for(self, field: EntityField) -> Any:
        return self.default_value

    def default_widget(self, view_type: str) -> str:
        return self.widget_type

    def annotation(self, field: EntityField) -> Any:
        """Pydantic annotation for a required value of this type."""
        return Any

    def optional_annotation(self, field: EntityField) -> Any:
        return Optional[self.annotation(field)]  # noqa: UP007

    def query_options(self, field: EntityField) -> list[QueryOption]:
        return []


class StringFieldTyper(FieldTyper):
    type = "string"
    title = "String"
    description = "Plain text"
    widget_type = "textfield"
    default_value = ""
    operators = (
        QueryOperator.EQ,
        QueryOperator.CONTAINS,
        QueryOperator.STARTS_WITH,
        QueryOperator.ENDS_WITH,
        QueryOperator.IS_NOT_NULL,
        QueryOperator.IS_NULL,
    )

    def annotation(self, field: EntityField) -> Any:
        return NonEmptyStr

    def optional_annotation(self, field: EntityField) -> Any:
        return str | None


class NumberFieldTyper(FieldTyper):
    type = "number"
    title = "Number"
    widget_type = "number"
    default_value = 0
    operators = (
        QueryOperator.EQ,
        QueryOperator.GT,
        QueryOperator.LT,
        QueryOperator.IS_NOT_NULL,
        QueryOperator.IS_NULL,
    )

    def annotation(self, field: EntityField) -> Any:
        return int | float


class BooleanFieldTyper(FieldTyper):
    type = "boolean"
    title = "Boolean"
    widget_type = "switch"
    default_value = False
    operators = (QueryOperator.EQ, QueryOperator.IS_NOT_NULL, QueryOperator.IS_NULL)

    def annotation(self, field: EntityField) -> Any:
        return bool

    def query_options(self, field: EntityField) -> list[QueryOption]:
        return [QueryOption(label="Yes", value=True), QueryOption(label="No", value=False)]


class DateFieldTyper(FieldTyper):
    type = "date"
    title = "Date"
    widget_type = "date"
    operators = (
        QueryOperator.EQ,
        QueryOperator.GT,
        QueryOperator.LT,
        QueryOperator.BETWEEN,
        QueryOperator.IS_NOT_NULL,
        QueryOperator.IS_NULL,
    )

    def default_value_for(self, field: EntityField) -> Any:
        return datetime.now(UTC)

    def annotation(self, field: EntityField) -> Any:
        return datetime


class EnumFieldTyper(FieldTyper):
    type = "enum"
    title = "Enum"
    widget_type = "select"
    operators = (
        QueryOperator.EQ,
        QueryOperator.NE,
        QueryOperator.IS_NOT_NULL,
        QueryOperator.IS_NULL,
    )

    def default_value_for(self, field: EntityField) -> Any:
        options = field.options
        return options[0] if options else None

    def annotation(self, field: EntityField) -> Any:
        values = _option_values(field)
        if not values:
            return NonEmptyStr
        return Literal[tuple(values)]

    def optional_annotation(self, field: EntityField) -> Any:
        values = _option_values(field)
        if not values:
            return str | None
        return Literal[tuple(values)] | None

    def query_options(self, field: EntityField) -> list[QueryOption]:
        raw = (field.type_options or {}).get("options")
        items = raw if isinstance(raw, list) else [raw]
        return [opt for opt in (normalize_option(item) for item in items) if opt]


class ArrayFieldTyper(FieldTyper):
    type = "array"
    title = "Multi-select"
    widget_type = "select"
    operators = (
        QueryOperator.IN,
        QueryOperator.NOT_IN,
        QueryOperator.IS_NOT_NULL,
        QueryOperator.IS_NULL,
    )

    def default_value_for(self, field: EntityField) -> Any:
        return []

    def annotation(self, field: EntityField) -> Any:
        values = _option_values(field)
        if not values:
            return list[str]
        return list[Literal[tuple(values)]]

    def query_options(self, field: EntityField) -> list[QueryOption]:
        return [opt for opt in (normalize_option(item) for item in field.options) if opt]


class _ToOneFieldTyper(FieldTyper):
    widget_type = "select"
    default_value = ""
    operators = (QueryOperator.EQ, QueryOperator.IS_NOT_NULL, QueryOperator.IS_NULL)

    def annotation(self, field: EntityField) -> Any:
        return str


class OneToOneFieldTyper(_ToOneFieldTyper):
    type = "one_to_one"
    title = "One to one"


class ManyToOneFieldTyper(_ToOneFieldTyper):
    type = "many_to_one"
    title = "Many to one"


class _ToManyFieldTyper(FieldTyper):
    widget_type = "reference"
    operators = (
        QueryOperator.IN,
        QueryOperator.NOT_IN,
        QueryOperator.IS_NOT_NULL,
        QueryOperator.IS_NULL,
    )

    def annotation(self, field: EntityField) -> Any:
        return list[str]


class OneToManyFieldTyper(_ToManyFieldTyper):
    type = "one_to_many"
    title = "One to many"


class ManyToManyFieldTyper(_ToManyFieldTyper):
    type = "many_to_many"
    title = "Many to many"


class BinaryFieldTyper(FieldTyper):
    type = "binary"
    title = "File"
    widget_type = "file"
    operators = (QueryOperator.IS_NOT_NULL, QueryOperator.IS_NULL)

    def annotation(self, field: EntityField) -> Any:
        return BinaryValue

    def optional_annotation(self, field: EntityField) -> Any:
        return PartialBinaryValue | None


class JsonFieldTyper(FieldTyper):
    type = "json"
    title = "JSON"
    widget_type = "json"
    operators = (QueryOperator.IS_NOT_NULL, QueryOperator.IS_NULL)

    def default_value_for(self, field: EntityField) -> Any:
        return {}

    def annotation(self, field: EntityField) -> Any:
        return dict[str, Any]


BUILTIN_FIELD_TYPERS: tuple[type[FieldTyper], ...] = (
    StringFieldTyper,
    NumberFieldTyper,
    BooleanFieldTyper,
    DateFieldTyper,
    EnumFieldTyper,
    ArrayFieldTyper,
    OneToOneFieldTyper,
    ManyToOneFieldTyper,
    OneToManyFieldTyper,
    ManyToManyFieldTyper,
    BinaryFieldTyper,
    JsonFieldTyper,
)


class FieldTyperRegistry:
    """Typers keyed by field type name, pre-loaded with the twelve built-ins."""

    def __init__(self) -> None:
        self._typers: dict[str, FieldTyper] = {}
        for typer_cls in BUILTIN_FIELD_TYPERS:
            self.register(typer_cls())

    def register(self, typer: FieldTyper) -> None:
        if typer.type in self._typers:
            logger.debug("field_typer_replaced", type=typer.type)
        self._typers[typer.type] = typer

    def get(self, field_type: str) -> FieldTyper | None:
        return self._typers.get(field_type)

    def has(self, field_type: str) -> bool:
        return field_type in self._typers

    def list_types(self) -> list[str]:
        return list(self._typers)

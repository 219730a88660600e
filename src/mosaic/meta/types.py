"""Metadata types: models, fields, views and entity objects.

All types are Pydantic v2 models. Python code uses snake_case attributes;
the portable JSON form uses camelCase aliases (``modelName``, ``viewType``,
``isRequired``...) so persisted snapshots stay readable by any host.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "CamelModel",
    "FieldType",
    "PRIMITIVE_FIELD_TYPES",
    "TO_ONE_FIELD_TYPES",
    "TO_MANY_FIELD_TYPES",
    "RELATION_FIELD_TYPES",
    "is_to_one",
    "is_to_many",
    "is_relation",
    "QueryOperator",
    "EntityField",
    "EntityModel",
    "ViewField",
    "ViewPanel",
    "ViewItem",
    "ViewDensity",
    "EntityView",
    "ViewKey",
    "ConfigSnapshot",
    "EntityObject",
    "EntityObjectReference",
    "QueryOption",
    "QueryItemMeta",
    "QueryMeta",
]


class CamelModel(BaseModel):
    """Base for every wire-visible type: camelCase aliases, snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_plain(self) -> dict[str, Any]:
        """Dump to the JSON-compatible camelCase form."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Field types
# =============================================================================

FieldType = Literal[
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
]

PRIMITIVE_FIELD_TYPES: frozenset[str] = frozenset({"string", "number", "boolean", "date"})
TO_ONE_FIELD_TYPES: frozenset[str] = frozenset({"one_to_one", "many_to_one"})
TO_MANY_FIELD_TYPES: frozenset[str] = frozenset({"one_to_many", "many_to_many"})
RELATION_FIELD_TYPES: frozenset[str] = TO_ONE_FIELD_TYPES | TO_MANY_FIELD_TYPES


def is_to_one(field_type: str) -> bool:
    return field_type in TO_ONE_FIELD_TYPES


def is_to_many(field_type: str) -> bool:
    return field_type in TO_MANY_FIELD_TYPES


def is_relation(field_type: str) -> bool:
    return field_type in RELATION_FIELD_TYPES


class QueryOperator(str, Enum):
    """Comparison operators available to filters and query metadata."""

    NONE = "none"
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    IN = "in"
    NOT_IN = "notIn"
    IS_NULL = "isNull"
    IS_NOT_NULL = "isNotNull"
    BETWEEN = "between"


# =============================================================================
# Models
# =============================================================================


class EntityField(CamelModel):
    """One field of a model.

    Attributes:
        name: Field name, unique within its model.
        title: Display title.
        type: Field type; relation types carry ``ref_model``.
        is_required: Value must be present and non-empty.
        is_primary_key: Part of the model's primary key.
        is_unique: Values are unique across the model.
        searchable: Offered in query metadata.
        editable: Offered for editing in form views.
        default_value: Value used when supplementing missing values.
        type_options: Type-specific options (``{"options": [...]}`` for enum/array).
        ref_model: Target model of a relation field.
        ref_field: Field on the target model the relation points back through.
        order: Display order hint.
    """

    name: str
    title: str = ""
    type: FieldType = "string"
    description: str | None = None
    is_required: bool = False
    is_primary_key: bool = False
    is_unique: bool = False
    searchable: bool = False
    editable: bool = True
    default_value: Any = None
    type_options: dict[str, Any] | None = None
    ref_model: str | None = None
    ref_field: str | None = None
    order: int | None = None

    @property
    def options(self) -> list[Any]:
        """Declared enum/array options (empty when none)."""
        raw = (self.type_options or {}).get("options")
        return list(raw) if isinstance(raw, list) else []


class EntityModel(CamelModel):
    """Named schema describing an entity's fields."""

    name: str
    title: str = ""
    description: str | None = None
    fields: list[EntityField] = Field(default_factory=list)


# =============================================================================
# Views
# =============================================================================

ViewDensity = Literal["small", "medium", "large"]


class ViewField(CamelModel):
    """A view item bound to one model field."""

    name: str
    title: str | None = None
    description: str | None = None
    widget: str | None = None
    widget_options: dict[str, Any] | None = None
    order: int | None = None
    flex: Literal[0, 1] | None = None
    span_cols: int | None = None
    width: int | None = None


class ViewPanel(CamelModel):
    """A titled group of nested view items."""

    title: str = ""
    items: list[ViewItem] = Field(default_factory=list)


ViewItem = ViewField | ViewPanel


class EntityView(CamelModel):
    """Typed layout of fields bound to a model.

    Views are keyed by ``(model_name, view_type, name)``. A view without a
    name is the default view for its ``(model_name, view_type)`` pair.
    """

    model_name: str
    view_type: str
    name: str | None = None
    title: str = ""
    description: str | None = None
    density: ViewDensity | None = None
    view_options: dict[str, Any] = Field(default_factory=dict)
    items: list[ViewItem] = Field(default_factory=list)
    can_edit: bool | None = None
    can_new: bool | None = None
    can_delete: bool | None = None

    @property
    def key(self) -> ViewKey:
        return (self.model_name, self.view_type, self.name)


ViewPanel.model_rebuild()
EntityView.model_rebuild()

ViewKey = tuple[str, str, str | None]


class ConfigSnapshot(CamelModel):
    """Serializable ``{models, views}`` document persisted under ``__config__``."""

    models: list[EntityModel] = Field(default_factory=list)
    views: list[EntityView] = Field(default_factory=list)


# =============================================================================
# Entity objects
# =============================================================================


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EntityObject(CamelModel):
    """A stored record of some model."""

    id: str
    model_name: str
    values: dict[str, Any] = Field(default_factory=dict)
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class EntityObjectReference(CamelModel):
    """Directional link created from a relation-typed field."""

    from_model_name: str
    from_field_name: str
    from_object_id: str
    to_model_name: str
    to_object_id: str


# =============================================================================
# Query metadata
# =============================================================================


class QueryOption(CamelModel):
    label: str
    value: Any


class QueryItemMeta(CamelModel):
    """Operators and options a searchable field supports."""

    field: EntityField
    operators: list[QueryOperator]
    options: list[QueryOption] = Field(default_factory=list)


class QueryMeta(CamelModel):
    items: list[QueryItemMeta] = Field(default_factory=list)

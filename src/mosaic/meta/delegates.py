"""Delegates: wrapped models and views exposing derived operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from mosaic.exceptions import ValueValidationError
from mosaic.meta.fieldtypes import FieldTyperRegistry
from mosaic.meta.types import (
    EntityField,
    EntityModel,
    EntityView,
    QueryItemMeta,
    QueryMeta,
    ViewField,
    ViewItem,
    ViewPanel,
)

if TYPE_CHECKING:
    from mosaic.meta.registry import MetaRegistry

__all__ = ["ModelDelegate", "ViewDelegate"]


class ModelDelegate:
    """Read-side wrapper around an :class:`EntityModel`.

    The generated validator class is built lazily and cached for the
    lifetime of the delegate; registering a new version of the model yields
    a new delegate.
    """

    def __init__(self, model: EntityModel, field_typers: FieldTyperRegistry) -> None:
        self._model = model
        self._typers = field_typers
        self._validator: type[BaseModel] | None = None

    def __repr__(self) -> str:
        return f"ModelDelegate({self._model.name!r})"

    @property
    def model(self) -> EntityModel:
        return self._model

    @property
    def name(self) -> str:
        return self._model.name

    @property
    def title(self) -> str:
        return self._model.title

    @property
    def description(self) -> str | None:
        return self._model.description

    @property
    def fields(self) -> list[EntityField]:
        return list(self._model.fields)

    def find_field_by_name(self, name: str) -> EntityField | None:
        return next((f for f in self._model.fields if f.name == name), None)

    def find_field_by_title(self, title: str) -> EntityField | None:
        return next((f for f in self._model.fields if f.title == title), None)

    def find_primary_key_fields(self) -> list[EntityField]:
        return [f for f in self._model.fields if f.is_primary_key]

    def find_unique_fields(self) -> list[EntityField]:
        return [f for f in self._model.fields if f.is_unique]

    def find_searchable_fields(self) -> list[EntityField]:
        return [f for f in self._model.fields if f.searchable]

    @property
    def validator(self) -> type[BaseModel]:
        """Pydantic model class validating this model's values.

        Fields whose type has no registered typer are not validated.
        Unknown keys are preserved.
        """
        if self._validator is None:
            definitions: dict[str, Any] = {}
            for field in self._model.fields:
                typer = self._typers.get(field.type)
                if typer is None:
                    continue
                if field.is_required:
                    definitions[field.name] = (typer.annotation(field), ...)
                else:
                    definitions[field.name] = (typer.optional_annotation(field), None)
            self._validator = create_model(
                f"{self._model.name}Values",
                __config__=ConfigDict(extra="allow", protected_namespaces=()),
                **definitions,
            )
        return self._validator

    def validate_values(self, values: dict[str, Any]) -> dict[str, Any]:
        """Validate ``values`` and return them coerced.

        Raises:
            ValueValidationError: If any field fails validation.
        """
        try:
            validated = self.validator.model_validate(values)
        except ValidationError as e:
            raise ValueValidationError(
                self._model.name, e.errors(include_url=False)
            ) from e
        return validated.model_dump(exclude_unset=True)

    def to_supplemented_values(self, values: dict[str, Any]) -> dict[str, Any]:
        """Fill falsy or missing values with defaults.

        The field's own ``default_value`` wins; otherwise the typer's
        structural default is used. Truthy values are never touched.
        """
        result = dict(values)
        for field in self._model.fields:
            if values.get(field.name):
                continue
            result[field.name] = self._default_for(field)
        return result

    def _default_for(self, field: EntityField) -> Any:
        if field.default_value is not None:
            return field.default_value
        typer = self._typers.get(field.type)
        if typer is None:
            return None
        return typer.default_value_for(field)

    def get_query_meta(self) -> QueryMeta:
        """Operators and options for each searchable field."""
        items: list[QueryItemMeta] = []
        for field in self.find_searchable_fields():
            typer = self._typers.get(field.type)
            if typer is None or not typer.operators:
                continue
            items.append(
                QueryItemMeta(
                    field=field,
                    operators=list(typer.operators),
                    options=typer.query_options(field),
                )
            )
        return QueryMeta(items=items)


class ViewDelegate:
    """Read-side wrapper around an :class:`EntityView`."""

    def __init__(
        self,
        view: EntityView,
        registry: MetaRegistry,
        field_typers: FieldTyperRegistry,
    ) -> None:
        self._view = view
        self._registry = registry
        self._typers = field_typers

    def __repr__(self) -> str:
        return (
            f"ViewDelegate({self._view.model_name!r}, "
            f"{self._view.view_type!r}, {self._view.name!r})"
        )

    @property
    def view(self) -> EntityView:
        return self._view

    @property
    def name(self) -> str | None:
        return self._view.name

    @property
    def title(self) -> str:
        return self._view.title

    @property
    def model_name(self) -> str:
        return self._view.model_name

    @property
    def view_type(self) -> str:
        return self._view.view_type

    @property
    def density(self) -> str | None:
        return self._view.density

    @property
    def view_options(self) -> dict[str, Any]:
        return dict(self._view.view_options)

    @property
    def items(self) -> list[ViewItem]:
        return list(self._view.items)

    def iter_fields(self) -> list[ViewField]:
        """Every field item, flattening panels in display order."""
        found: list[ViewField] = []

        def walk(items: list[ViewItem]) -> None:
            for item in items:
                if isinstance(item, ViewPanel):
                    walk(item.items)
                else:
                    found.append(item)

        walk(self._view.items)
        return found

    def to_supplemented_view(
        self, view_options: dict[str, Any] | None = None
    ) -> ViewDelegate:
        """Return a copy with item titles, orders and widgets filled in.

        Args:
            view_options: Replaces the view's options when non-empty.
        """
        update: dict[str, Any] = {
            "density": self._view.density or "medium",
            "items": [self._supplement_item(item) for item in self._view.items],
        }
        if view_options:
            update["view_options"] = dict(view_options)
        view = self._view.model_copy(update=update)
        return ViewDelegate(view, self._registry, self._typers)

    def _supplement_item(self, item: ViewItem) -> ViewItem:
        if isinstance(item, ViewPanel):
            return item.model_copy(
                update={"items": [self._supplement_item(i) for i in item.items]}
            )
        model = self._registry.get_model(self._view.model_name)
        model_field = model.find_field_by_name(item.name) if model else None
        if model_field is None:
            return item
        return item.model_copy(
            update={
                "title": item.title or model_field.title,
                "description": item.description or model_field.description,
                "order": item.order or model_field.order or 0,
                "flex": item.flex or 0,
                "widget": item.widget or self._default_widget(model_field),
            }
        )

    def _default_widget(self, field: EntityField) -> str:
        typer = self._typers.get(field.type)
        if typer is None:
            return "none"
        return typer.default_widget(self._view.view_type)

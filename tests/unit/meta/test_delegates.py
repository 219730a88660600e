"""Tests for model and view delegates."""

from __future__ import annotations

import pytest

from mosaic.exceptions import ValueValidationError
from mosaic.meta import EntityField, EntityModel, EntityView, MetaRegistry, ViewField, ViewPanel
from mosaic.meta.delegates import ModelDelegate
from mosaic.meta.fieldtypes import FieldTyperRegistry


@pytest.fixture
def customer(meta_registry: MetaRegistry) -> ModelDelegate:
    delegate = meta_registry.get_model("customer")
    assert delegate is not None
    return delegate


class TestModelDelegate:
    """Tests for derived model operations."""

    def test_field_lookup(self, customer: ModelDelegate) -> None:
        by_name = customer.find_field_by_name("email")
        assert by_name is not None
        assert by_name.is_unique

        by_title = customer.find_field_by_title("Revenue")
        assert by_title is not None
        assert by_title.name == "revenue"

        assert customer.find_field_by_name("missing") is None

    def test_field_filters(self, customer: ModelDelegate) -> None:
        assert [f.name for f in customer.find_unique_fields()] == ["email"]
        assert [f.name for f in customer.find_searchable_fields()] == ["name", "status"]
        assert customer.find_primary_key_fields() == []

    def test_validate_values_accepts_valid(self, customer: ModelDelegate) -> None:
        values = customer.validate_values(
            {"name": "Ada", "status": "lead", "revenue": 12.5, "vip": True}
        )

        assert values["name"] == "Ada"
        assert values["revenue"] == 12.5

    def test_validate_values_keeps_unknown_keys(self, customer: ModelDelegate) -> None:
        values = customer.validate_values({"name": "Ada", "nickname": "ada"})

        assert values["nickname"] == "ada"

    @pytest.mark.parametrize(
        "values",
        [
            {},
            {"name": ""},
            {"name": "Ada", "status": "prospect"},
            {"name": "Ada", "revenue": "lots"},
        ],
    )
    def test_validate_values_rejects_invalid(
        self, customer: ModelDelegate, values: dict[str, object]
    ) -> None:
        with pytest.raises(ValueValidationError) as exc_info:
            customer.validate_values(values)

        assert exc_info.value.model_name == "customer"
        assert exc_info.value.errors

    def test_validator_cached(self, customer: ModelDelegate) -> None:
        assert customer.validator is customer.validator

    def test_unknown_field_type_not_validated(self) -> None:
        typers = FieldTyperRegistry()
        model = EntityModel(name="m", fields=[EntityField(name="x", type="json", is_required=True)])
        delegate = ModelDelegate(model, typers)
        typers._typers.pop("json")

        assert delegate.validate_values({}) == {}

    def test_to_supplemented_values(self, customer: ModelDelegate) -> None:
        values = customer.to_supplemented_values({"name": "Ada", "revenue": 0})

        assert values["name"] == "Ada"
        assert values["revenue"] == 0
        assert values["vip"] is False
        assert values["status"] == "lead"
        assert values["email"] == ""
        assert values["orders"] is None

    def test_supplement_prefers_field_default(self) -> None:
        model = EntityModel(
            name="m",
            fields=[EntityField(name="kind", type="string", default_value="basic")],
        )
        delegate = ModelDelegate(model, FieldTyperRegistry())

        assert delegate.to_supplemented_values({})["kind"] == "basic"
        assert delegate.to_supplemented_values({"kind": "pro"})["kind"] == "pro"

    def test_query_meta(self, customer: ModelDelegate) -> None:
        meta = customer.get_query_meta()

        names = [item.field.name for item in meta.items]
        assert names == ["name", "status"]
        status = meta.items[1]
        assert [o.value for o in status.options] == ["lead", "active", "churned"]


class TestViewDelegate:
    """Tests for view supplementation."""

    def test_iter_fields_flattens_panels(self, meta_registry: MetaRegistry) -> None:
        view = meta_registry.find_view("customer", "form")
        assert view is not None

        assert [f.name for f in view.iter_fields()] == ["name", "status", "revenue"]

    def test_supplemented_view_fills_items(self, meta_registry: MetaRegistry) -> None:
        view = meta_registry.find_view("customer", "form")
        assert view is not None

        supplemented = view.to_supplemented_view()

        assert supplemented.density == "medium"
        fields = {f.name: f for f in supplemented.iter_fields()}
        assert fields["name"].title == "Name"
        assert fields["name"].widget == "textfield"
        assert fields["status"].widget == "select"
        assert fields["revenue"].widget == "number"
        assert fields["revenue"].order == 0
        # The original view is untouched
        assert view.density is None

    def test_explicit_widget_kept(self, meta_registry: MetaRegistry) -> None:
        meta_registry.register_view(
            EntityView(
                model_name="customer",
                view_type="form",
                name="notes",
                items=[ViewField(name="name", widget="markdown", title="Notes")],
            )
        )
        view = meta_registry.find_view("customer", "form", "notes")
        assert view is not None

        item = view.to_supplemented_view().iter_fields()[0]
        assert item.widget == "markdown"
        assert item.title == "Notes"

    def test_unknown_field_left_as_is(self, meta_registry: MetaRegistry) -> None:
        meta_registry.register_view(
            EntityView(
                model_name="customer",
                view_type="form",
                name="odd",
                items=[ViewPanel(title="P", items=[ViewField(name="ghost")])],
            )
        )
        view = meta_registry.find_view("customer", "form", "odd")
        assert view is not None

        item = view.to_supplemented_view().iter_fields()[0]
        assert item.widget is None

    def test_view_options_replaced(self, meta_registry: MetaRegistry) -> None:
        view = meta_registry.find_view("customer", "grid")
        assert view is not None

        supplemented = view.to_supplemented_view({"pageSize": 5})
        assert supplemented.view_options == {"pageSize": 5}
        assert view.to_supplemented_view().view_options == {}

"""Tests for condition-tree evaluation."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from mosaic.datasource import CompositeCondition, EntityQuery, LeafCondition, matches
from mosaic.meta import EntityObject
from mosaic.meta.types import QueryOperator


@pytest.fixture
def customer() -> EntityObject:
    return EntityObject(
        id="c-1",
        model_name="customer",
        values={
            "name": "Acme Corp",
            "revenue": 120,
            "status": "active",
            "tags": ["b2b", "eu"],
            "email": "",
            "signed": datetime(2024, 3, 1, tzinfo=UTC),
        },
    )


class TestLeafConditions:
    @pytest.mark.parametrize(
        ("condition", "expected"),
        [
            (LeafCondition(field="status", value="active"), True),
            (LeafCondition(field="status", operator=QueryOperator.NE, value="active"), False),
            (LeafCondition(field="revenue", operator=QueryOperator.GT, value=100), True),
            (LeafCondition(field="revenue", operator=QueryOperator.LTE, value=100), False),
            (
                LeafCondition(
                    field="revenue", operator=QueryOperator.BETWEEN, value=100, value2=150
                ),
                True,
            ),
            (LeafCondition(field="name", operator=QueryOperator.CONTAINS, value="acme"), True),
            (LeafCondition(field="name", operator=QueryOperator.STARTS_WITH, value="Acme"), True),
            (LeafCondition(field="name", operator=QueryOperator.ENDS_WITH, value="Inc"), False),
            (LeafCondition(field="tags", operator=QueryOperator.CONTAINS, value="eu"), True),
            (LeafCondition(field="tags", operator=QueryOperator.IN, value=["eu", "us"]), True),
            (LeafCondition(field="status", operator=QueryOperator.NOT_IN, value=["lead"]), True),
            (LeafCondition(field="email", operator=QueryOperator.IS_NULL), True),
            (LeafCondition(field="missing", operator=QueryOperator.IS_NULL), True),
            (LeafCondition(field="name", operator=QueryOperator.IS_NOT_NULL), True),
            (LeafCondition(field="id", value="c-1"), True),
            (LeafCondition(field="anything", operator=QueryOperator.NONE), True),
            (
                LeafCondition(field="signed", operator=QueryOperator.GT, value="2024-01-01T00:00:00+00:00"),
                True,
            ),
        ],
    )
    def test_leaf(
        self, customer: EntityObject, condition: LeafCondition, expected: bool
    ) -> None:
        assert matches(condition, customer) is expected

    def test_incomparable_values_do_not_match(self, customer: EntityObject) -> None:
        condition = LeafCondition(field="name", operator=QueryOperator.GT, value=5)

        assert matches(condition, customer) is False


class TestCompositeConditions:
    def test_none_matches_everything(self, customer: EntityObject) -> None:
        assert matches(None, customer)

    def test_and_or_not(self, customer: EntityObject) -> None:
        active = LeafCondition(field="status", value="active")
        lead = LeafCondition(field="status", value="lead")
        big = LeafCondition(field="revenue", operator=QueryOperator.GTE, value=100)

        assert matches(CompositeCondition(and_=[active, big]), customer)
        assert not matches(CompositeCondition(and_=[lead, big]), customer)
        assert matches(CompositeCondition(or_=[lead, big]), customer)
        assert not matches(CompositeCondition(not_=[active]), customer)
        assert matches(CompositeCondition(and_=[CompositeCondition(not_=[lead]), big]), customer)

    def test_parsed_from_wire_form(self, customer: EntityObject) -> None:
        query = EntityQuery.model_validate(
            {
                "pageSize": 10,
                "filter": {
                    "or": [
                        {"field": "status", "operator": "eq", "value": "lead"},
                        {"field": "name", "operator": "startsWith", "value": "Acme"},
                    ]
                },
            }
        )

        assert query.page_size == 10
        assert matches(query.filter, customer)

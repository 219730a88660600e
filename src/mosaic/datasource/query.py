"""Query, filter and result types shared by every data source."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from mosaic.meta.types import CamelModel, EntityObject, QueryOperator

__all__ = [
    "LeafCondition",
    "CompositeCondition",
    "QueryItem",
    "ReferenceScope",
    "ReferenceSource",
    "EntityQuery",
    "QueryResult",
    "EntityTreeNode",
    "matches",
]


class LeafCondition(CamelModel):
    """Compare one field against a value.

    ``value2`` is the upper bound for ``between``.
    """

    field: str
    operator: QueryOperator = QueryOperator.EQ
    value: Any = None
    value2: Any = None


class CompositeCondition(CamelModel):
    """Combine conditions: all of ``and``, any of ``or``, none of ``not``."""

    and_: list[QueryItem] | None = Field(default=None, alias="and")
    or_: list[QueryItem] | None = Field(default=None, alias="or")
    not_: list[QueryItem] | None = Field(default=None, alias="not")


QueryItem = LeafCondition | CompositeCondition

CompositeCondition.model_rebuild()


class ReferenceSource(CamelModel):
    """Origin of a reference: the object and relation field it starts from."""

    from_model_name: str
    from_field_name: str
    from_object_id: str


class ReferenceScope(ReferenceSource):
    """A reference tuple restricting results to objects linked from one object."""

    to_model_name: str


class EntityQuery(CamelModel):
    """Paged, sortable, filterable query.

    Attributes:
        page_size: Objects per page; ``None`` returns everything.
        page_index: 1-based page number.
        sort_by: Field name to direction, applied in declaration order.
        references: Only objects linked through this reference tuple.
        filter: Condition tree over object values.
    """

    page_size: int | None = Field(default=None, gt=0)
    page_index: int = Field(default=1, ge=1)
    sort_by: dict[str, Literal["asc", "desc"]] | None = None
    references: ReferenceScope | None = None
    filter: QueryItem | None = None


class QueryResult(CamelModel):
    data: list[EntityObject] = Field(default_factory=list)
    count: int = 0


class EntityTreeNode(CamelModel):
    """One node of a self-referential hierarchy."""

    data: EntityObject | None = None
    parent_id: str | None = None
    children: list[EntityTreeNode] = Field(default_factory=list)


EntityTreeNode.model_rebuild()


# =============================================================================
# Evaluation
# =============================================================================


def _coerce_pair(left: Any, right: Any) -> tuple[Any, Any]:
    if isinstance(left, datetime) and isinstance(right, str):
        return left, datetime.fromisoformat(right)
    if isinstance(left, str) and isinstance(right, datetime):
        return datetime.fromisoformat(left), right
    return left, right


def _compare(op: QueryOperator, actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    try:
        actual, expected = _coerce_pair(actual, expected)
        if op is QueryOperator.GT:
            return bool(actual > expected)
        if op is QueryOperator.GTE:
            return bool(actual >= expected)
        if op is QueryOperator.LT:
            return bool(actual < expected)
        return bool(actual <= expected)
    except (TypeError, ValueError):
        return False


def _is_null(value: Any) -> bool:
    return value is None or value == "" or value == []


def _match_leaf(condition: LeafCondition, obj: EntityObject) -> bool:
    op = condition.operator
    actual = obj.id if condition.field == "id" else obj.values.get(condition.field)
    expected = condition.value

    if op is QueryOperator.NONE:
        return True
    if op is QueryOperator.IS_NULL:
        return _is_null(actual)
    if op is QueryOperator.IS_NOT_NULL:
        return not _is_null(actual)
    if op is QueryOperator.EQ:
        return bool(actual == expected)
    if op is QueryOperator.NE:
        return bool(actual != expected)
    if op in (QueryOperator.GT, QueryOperator.GTE, QueryOperator.LT, QueryOperator.LTE):
        return _compare(op, actual, expected)
    if op is QueryOperator.BETWEEN:
        return _compare(QueryOperator.GTE, actual, expected) and _compare(
            QueryOperator.LTE, actual, condition.value2
        )
    if op is QueryOperator.CONTAINS:
        if isinstance(actual, list):
            return expected in actual
        if actual is None or expected is None:
            return False
        return str(expected).lower() in str(actual).lower()
    if op is QueryOperator.STARTS_WITH:
        return isinstance(actual, str) and actual.startswith(str(expected))
    if op is QueryOperator.ENDS_WITH:
        return isinstance(actual, str) and actual.endswith(str(expected))
    if op in (QueryOperator.IN, QueryOperator.NOT_IN):
        candidates = expected if isinstance(expected, list) else [expected]
        if isinstance(actual, list):
            hit = any(item in candidates for item in actual)
        else:
            hit = actual in candidates
        return hit if op is QueryOperator.IN else not hit
    return False


def matches(item: QueryItem | None, obj: EntityObject) -> bool:
    """Evaluate a condition tree against ``obj``; ``None`` matches everything."""
    if item is None:
        return True
    if isinstance(item, LeafCondition):
        return _match_leaf(item, obj)
    if item.and_ is not None and not all(matches(sub, obj) for sub in item.and_):
        return False
    if item.or_ is not None and not any(matches(sub, obj) for sub in item.or_):
        return False
    if item.not_ is not None and any(matches(sub, obj) for sub in item.not_):
        return False
    return True

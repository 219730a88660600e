"""Data source contract, query types and the in-memory implementation."""

from __future__ import annotations

from mosaic.datasource.base import DATA_SOURCE_OPERATIONS, DataSource
from mosaic.datasource.factory import DataSourceFactory
from mosaic.datasource.memory import InMemoryDataSource
from mosaic.datasource.query import (
    CompositeCondition,
    EntityQuery,
    EntityTreeNode,
    LeafCondition,
    QueryItem,
    QueryResult,
    ReferenceScope,
    ReferenceSource,
    matches,
)

__all__ = [
    "DATA_SOURCE_OPERATIONS",
    "CompositeCondition",
    "DataSource",
    "DataSourceFactory",
    "EntityQuery",
    "EntityTreeNode",
    "InMemoryDataSource",
    "LeafCondition",
    "QueryItem",
    "QueryResult",
    "ReferenceScope",
    "ReferenceSource",
    "matches",
]

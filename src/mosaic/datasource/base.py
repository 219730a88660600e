"""The data source contract consumed by routing, boot and reactive layers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mosaic.datasource.query import (
    EntityQuery,
    EntityTreeNode,
    QueryResult,
    ReferenceSource,
)
from mosaic.meta.types import ConfigSnapshot, EntityObject, EntityObjectReference

__all__ = ["DataSource", "DATA_SOURCE_OPERATIONS"]


#: Operations exposed as reactive subscriptions. Names are the async
#: methods of :class:`DataSource`; boot-only and config operations are
#: deliberately absent.
DATA_SOURCE_OPERATIONS: tuple[str, ...] = (
    "find_one",
    "find_many",
    "find_one_with_references",
    "find_references_count",
    "find_tree_objects",
    "find_count",
    "create",
    "update_values",
    "delete_many",
)


@runtime_checkable
class DataSource(Protocol):
    """Asynchronous storage boundary.

    Implementations own persistence. The engine only needs the operations
    below; :class:`~mosaic.datasource.memory.InMemoryDataSource` is the
    reference implementation.
    """

    async def find_plain_config(self) -> ConfigSnapshot | None:
        """Latest persisted ``{models, views}`` snapshot, if any."""
        ...

    async def save_plain_config(self, snapshot: ConfigSnapshot) -> None: ...

    async def find_one(
        self, id: str, model_name: str | None = None
    ) -> EntityObject | None: ...

    async def find_many(
        self, model_name: str, query: EntityQuery | None = None
    ) -> QueryResult: ...

    async def find_one_with_references(
        self,
        model_name: str,
        id: str,
        include_field_names: list[str] | None = None,
    ) -> EntityObject | None: ...

    async def find_references_count(
        self,
        from_model_name: str,
        from_field_name: str,
        from_object_id: str,
        to_model_name: str,
    ) -> int: ...

    async def find_tree_objects(
        self, model_name: str, field_name: str, root_object_id: str | None = None
    ) -> list[EntityTreeNode]: ...

    async def find_count(
        self, model_name: str, query: EntityQuery | None = None
    ) -> int: ...

    async def create(
        self,
        model_name: str,
        values: dict[str, Any],
        id: str | None = None,
        reference: ReferenceSource | None = None,
    ) -> EntityObject: ...

    async def update_values(self, id: str, values: dict[str, Any]) -> bool: ...

    async def delete_many(self, ids: list[str]) -> bool: ...

    async def ingest_seed(
        self,
        entities: list[EntityObject],
        references: list[EntityObjectReference],
    ) -> int:
        """Insert seed objects and references in one all-or-nothing batch.

        Objects whose id already exists are skipped.

        Returns:
            Number of objects inserted.

        Raises:
            SeedIngestionError: If the batch could not be applied; nothing
                from the batch is kept.
        """
        ...

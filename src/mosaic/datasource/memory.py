"""Dictionary-backed data source."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from mosaic.constants import CONFIG_MODEL_NAME
from mosaic.datasource.query import (
    EntityQuery,
    EntityTreeNode,
    QueryResult,
    ReferenceScope,
    ReferenceSource,
    matches,
)
from mosaic.exceptions import SeedIngestionError
from mosaic.logging import get_logger
from mosaic.meta.serializer import load_snapshot
from mosaic.meta.types import ConfigSnapshot, EntityObject, EntityObjectReference

__all__ = ["InMemoryDataSource"]

logger = get_logger(__name__)

ReferenceKey = tuple[str, str, str, str, str]


def _ref_key(ref: EntityObjectReference) -> ReferenceKey:
    return (
        ref.from_model_name,
        ref.from_field_name,
        ref.from_object_id,
        ref.to_model_name,
        ref.to_object_id,
    )


def _sort_value(value: Any) -> tuple[int, Any]:
    if value is None:
        return (1, "")
    if isinstance(value, bool | int | float):
        return (0, value)
    return (0, str(value))


class InMemoryDataSource:
    """A :class:`~mosaic.datasource.base.DataSource` holding everything in dicts.

    Deletion is soft (``is_deleted``); deleted objects are invisible to every
    read. Configuration snapshots are stored as objects of the
    ``__config__`` model, newest last.

    Example:
        ```python
        source = InMemoryDataSource()
        customer = await source.create("customer", {"name": "Acme"})
        result = await source.find_many("customer", EntityQuery(page_size=10))
        ```
    """

    def __init__(self) -> None:
        self._objects: dict[str, EntityObject] = {}
        self._references: dict[ReferenceKey, EntityObjectReference] = {}

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    async def find_plain_config(self) -> ConfigSnapshot | None:
        configs = [o for o in self._objects.values() if o.model_name == CONFIG_MODEL_NAME]
        if not configs:
            return None
        return load_snapshot(configs[-1].values)

    async def save_plain_config(self, snapshot: ConfigSnapshot) -> None:
        obj = EntityObject(
            id=uuid.uuid4().hex,
            model_name=CONFIG_MODEL_NAME,
            values=snapshot.to_plain(),
        )
        self._objects[obj.id] = obj
        logger.info(
            "config_snapshot_saved",
            id=obj.id,
            models=len(snapshot.models),
            views=len(snapshot.views),
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _live(self, model_name: str) -> list[EntityObject]:
        return [
            o
            for o in self._objects.values()
            if o.model_name == model_name and not o.is_deleted
        ]

    def _referenced_ids(self, scope: ReferenceScope) -> set[str]:
        return {
            ref.to_object_id
            for ref in self._references.values()
            if ref.from_model_name == scope.from_model_name
            and ref.from_field_name == scope.from_field_name
            and ref.from_object_id == scope.from_object_id
            and ref.to_model_name == scope.to_model_name
        }

    def _select(self, model_name: str, query: EntityQuery | None) -> list[EntityObject]:
        query = query or EntityQuery()
        objects = self._live(model_name)
        if query.references is not None:
            allowed = self._referenced_ids(query.references)
            objects = [o for o in objects if o.id in allowed]
        objects = [o for o in objects if matches(query.filter, o)]
        for field_name, direction in reversed(list((query.sort_by or {}).items())):
            objects.sort(
                key=lambda o, f=field_name: _sort_value(o.values.get(f)),
                reverse=direction == "desc",
            )
        return objects

    async def find_one(self, id: str, model_name: str | None = None) -> EntityObject | None:
        obj = self._objects.get(id)
        if obj is None or obj.is_deleted:
            return None
        if model_name is not None and obj.model_name != model_name:
            return None
        return obj

    async def find_many(
        self, model_name: str, query: EntityQuery | None = None
    ) -> QueryResult:
        objects = self._select(model_name, query)
        count = len(objects)
        if query is not None and query.page_size is not None:
            start = (query.page_index - 1) * query.page_size
            objects = objects[start : start + query.page_size]
        return QueryResult(data=objects, count=count)

    async def find_count(self, model_name: str, query: EntityQuery | None = None) -> int:
        return len(self._select(model_name, query))

    async def find_one_with_references(
        self,
        model_name: str,
        id: str,
        include_field_names: list[str] | None = None,
    ) -> EntityObject | None:
        """Return the object with referenced objects inlined per field.

        Each included field's value becomes the list of objects it links to.
        """
        obj = await self.find_one(id, model_name)
        if obj is None:
            return None
        linked: dict[str, list[dict[str, Any]]] = {}
        for ref in self._references.values():
            if ref.from_model_name != model_name or ref.from_object_id != id:
                continue
            if include_field_names is not None and ref.from_field_name not in include_field_names:
                continue
            target = await self.find_one(ref.to_object_id, ref.to_model_name)
            if target is not None:
                linked.setdefault(ref.from_field_name, []).append(target.to_plain())
        return obj.model_copy(update={"values": {**obj.values, **linked}})

    async def find_references_count(
        self,
        from_model_name: str,
        from_field_name: str,
        from_object_id: str,
        to_model_name: str,
    ) -> int:
        scope = ReferenceScope(
            from_model_name=from_model_name,
            from_field_name=from_field_name,
            from_object_id=from_object_id,
            to_model_name=to_model_name,
        )
        return sum(
            1
            for target_id in self._referenced_ids(scope)
            if (o := self._objects.get(target_id)) is not None and not o.is_deleted
        )

    async def find_tree_objects(
        self, model_name: str, field_name: str, root_object_id: str | None = None
    ) -> list[EntityTreeNode]:
        """Build the hierarchy linked through ``field_name`` on ``model_name``.

        Returns:
            ``[root]`` when ``root_object_id`` is given (empty if missing),
            otherwise every object that is nobody's child, as trees.
        """
        children_of: dict[str, list[str]] = {}
        for ref in self._references.values():
            if (
                ref.from_model_name == model_name
                and ref.from_field_name == field_name
                and ref.to_model_name == model_name
            ):
                children_of.setdefault(ref.from_object_id, []).append(ref.to_object_id)

        def build(object_id: str, parent_id: str | None, seen: frozenset[str]) -> EntityTreeNode | None:
            obj = self._objects.get(object_id)
            if obj is None or obj.is_deleted:
                return None
            nodes = [
                build(child_id, object_id, seen | {object_id})
                for child_id in children_of.get(object_id, [])
                if child_id not in seen
            ]
            return EntityTreeNode(
                data=obj, parent_id=parent_id, children=[n for n in nodes if n]
            )

        if root_object_id is not None:
            root = build(root_object_id, None, frozenset())
            return [root] if root else []

        child_ids = {cid for ids in children_of.values() for cid in ids}
        roots = [o for o in self._live(model_name) if o.id not in child_ids]
        return [n for n in (build(o.id, None, frozenset()) for o in roots) if n]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create(
        self,
        model_name: str,
        values: dict[str, Any],
        id: str | None = None,
        reference: ReferenceSource | None = None,
    ) -> EntityObject:
        """Create an object, optionally linking it from ``reference``."""
        obj = EntityObject(id=id or uuid.uuid4().hex, model_name=model_name, values=dict(values))
        self._objects[obj.id] = obj
        if reference is not None:
            ref = EntityObjectReference(
                from_model_name=reference.from_model_name,
                from_field_name=reference.from_field_name,
                from_object_id=reference.from_object_id,
                to_model_name=model_name,
                to_object_id=obj.id,
            )
            self._references[_ref_key(ref)] = ref
        return obj

    async def update_values(self, id: str, values: dict[str, Any]) -> bool:
        obj = self._objects.get(id)
        if obj is None or obj.is_deleted:
            return False
        self._objects[id] = obj.model_copy(
            update={"values": {**obj.values, **values}, "updated_at": datetime.now(UTC)}
        )
        return True

    async def delete_many(self, ids: list[str]) -> bool:
        deleted = False
        for object_id in ids:
            obj = self._objects.get(object_id)
            if obj is not None and not obj.is_deleted:
                self._objects[object_id] = obj.model_copy(
                    update={"is_deleted": True, "updated_at": datetime.now(UTC)}
                )
                deleted = True
        return deleted

    async def ingest_seed(
        self,
        entities: list[EntityObject],
        references: list[EntityObjectReference],
    ) -> int:
        objects = dict(self._objects)
        refs = dict(self._references)
        inserted = 0
        try:
            for entity in entities:
                if not entity.model_name:
                    raise ValueError(f"Seed object '{entity.id}' has no model name")
                if entity.id in objects:
                    continue
                objects[entity.id] = entity
                inserted += 1
            for ref in references:
                if ref.from_object_id not in objects or ref.to_object_id not in objects:
                    raise ValueError(
                        f"Seed reference {ref.from_object_id}->{ref.to_object_id} "
                        "points at an unknown object"
                    )
                refs.setdefault(_ref_key(ref), ref)
        except ValueError as e:
            raise SeedIngestionError(f"Seed batch rejected: {e}") from e

        self._objects = objects
        self._references = refs
        return inserted

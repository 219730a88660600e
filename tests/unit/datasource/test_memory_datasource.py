"""Tests for InMemoryDataSource."""

from __future__ import annotations

import pytest

from mosaic.datasource import (
    DataSource,
    DataSourceFactory,
    EntityQuery,
    InMemoryDataSource,
    LeafCondition,
    ReferenceScope,
    ReferenceSource,
)
from mosaic.exceptions import SeedIngestionError
from mosaic.meta import ConfigSnapshot, EntityModel, EntityObject, EntityObjectReference
from mosaic.meta.types import QueryOperator


async def _seed_customers(source: InMemoryDataSource) -> list[EntityObject]:
    return [
        await source.create("customer", {"name": "Cobalt", "revenue": 30}, id="c-3"),
        await source.create("customer", {"name": "Acme", "revenue": 10}, id="c-1"),
        await source.create("customer", {"name": "Bolt", "revenue": 20}, id="c-2"),
    ]


class TestProtocol:
    def test_satisfies_data_source_protocol(self, data_source: InMemoryDataSource) -> None:
        assert isinstance(data_source, DataSource)


class TestReads:
    """Tests for find operations."""

    async def test_find_one(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)

        found = await data_source.find_one("c-1")
        assert found is not None
        assert found.values["name"] == "Acme"
        assert await data_source.find_one("c-1", "order") is None
        assert await data_source.find_one("missing") is None

    async def test_find_many_sorted_and_paged(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)

        result = await data_source.find_many(
            "customer",
            EntityQuery(page_size=2, page_index=1, sort_by={"name": "asc"}),
        )
        assert result.count == 3
        assert [o.values["name"] for o in result.data] == ["Acme", "Bolt"]

        second = await data_source.find_many(
            "customer",
            EntityQuery(page_size=2, page_index=2, sort_by={"revenue": "desc"}),
        )
        assert [o.values["name"] for o in second.data] == ["Acme"]

    async def test_find_many_filtered(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)

        result = await data_source.find_many(
            "customer",
            EntityQuery(filter=LeafCondition(field="revenue", operator=QueryOperator.GT, value=15)),
        )
        assert {o.id for o in result.data} == {"c-2", "c-3"}
        assert await data_source.find_count(
            "customer", EntityQuery(filter=LeafCondition(field="name", value="Acme"))
        ) == 1

    async def test_find_many_without_query_returns_all(
        self, data_source: InMemoryDataSource
    ) -> None:
        await _seed_customers(data_source)

        result = await data_source.find_many("customer")
        assert result.count == 3
        assert len(result.data) == 3

    async def test_find_many_by_reference(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)
        origin = ReferenceSource(
            from_model_name="customer", from_field_name="orders", from_object_id="c-1"
        )
        await data_source.create("order", {"code": "A-1"}, reference=origin)
        await data_source.create("order", {"code": "A-2"}, reference=origin)
        await data_source.create("order", {"code": "B-1"})

        scope = ReferenceScope(**origin.model_dump(), to_model_name="order")
        result = await data_source.find_many("order", EntityQuery(references=scope))

        assert sorted(o.values["code"] for o in result.data) == ["A-1", "A-2"]
        assert await data_source.find_references_count("customer", "orders", "c-1", "order") == 2

    async def test_find_one_with_references(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)
        origin = ReferenceSource(
            from_model_name="customer", from_field_name="orders", from_object_id="c-1"
        )
        await data_source.create("order", {"code": "A-1"}, reference=origin)

        obj = await data_source.find_one_with_references("customer", "c-1")
        assert obj is not None
        assert obj.values["orders"][0]["values"]["code"] == "A-1"

        excluded = await data_source.find_one_with_references("customer", "c-1", ["address"])
        assert excluded is not None
        assert "orders" not in excluded.values

    async def test_find_tree_objects(self, data_source: InMemoryDataSource) -> None:
        await data_source.create("folder", {"name": "root"}, id="f-root")
        for child in ("f-a", "f-b"):
            await data_source.create(
                "folder",
                {"name": child},
                id=child,
                reference=ReferenceSource(
                    from_model_name="folder", from_field_name="children", from_object_id="f-root"
                ),
            )

        trees = await data_source.find_tree_objects("folder", "children")
        assert len(trees) == 1
        assert trees[0].data is not None
        assert trees[0].data.id == "f-root"
        assert sorted(c.parent_id or "" for c in trees[0].children) == ["f-root", "f-root"]

        subtree = await data_source.find_tree_objects("folder", "children", "f-a")
        assert len(subtree) == 1
        assert subtree[0].children == []
        assert await data_source.find_tree_objects("folder", "children", "nope") == []


class TestWrites:
    """Tests for create, update and delete."""

    async def test_create_generates_id(self, data_source: InMemoryDataSource) -> None:
        obj = await data_source.create("customer", {"name": "Acme"})

        assert obj.id
        assert obj.model_name == "customer"

    async def test_update_values_merges(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)

        assert await data_source.update_values("c-1", {"vip": True})
        updated = await data_source.find_one("c-1")
        assert updated is not None
        assert updated.values == {"name": "Acme", "revenue": 10, "vip": True}
        assert not await data_source.update_values("missing", {"vip": True})

    async def test_delete_is_soft(self, data_source: InMemoryDataSource) -> None:
        await _seed_customers(data_source)

        assert await data_source.delete_many(["c-1", "missing"])
        assert await data_source.find_one("c-1") is None
        assert await data_source.find_count("customer") == 2
        assert not await data_source.delete_many(["c-1"])
        assert not await data_source.update_values("c-1", {"name": "x"})


class TestConfig:
    """Tests for configuration snapshot persistence."""

    async def test_no_config_initially(self, data_source: InMemoryDataSource) -> None:
        assert await data_source.find_plain_config() is None

    async def test_latest_config_returned(self, data_source: InMemoryDataSource) -> None:
        await data_source.save_plain_config(ConfigSnapshot(models=[EntityModel(name="a")]))
        await data_source.save_plain_config(ConfigSnapshot(models=[EntityModel(name="b")]))

        snapshot = await data_source.find_plain_config()
        assert snapshot is not None
        assert [m.name for m in snapshot.models] == ["b"]


class TestIngestSeed:
    """Tests for all-or-nothing seed ingestion."""

    async def test_inserts_objects_and_references(self, data_source: InMemoryDataSource) -> None:
        entities = [
            EntityObject(id="u-1", model_name="user", values={"name": "Ada"}),
            EntityObject(id="r-1", model_name="role", values={"name": "admin"}),
        ]
        refs = [
            EntityObjectReference(
                from_model_name="user",
                from_field_name="roles",
                from_object_id="u-1",
                to_model_name="role",
                to_object_id="r-1",
            )
        ]

        assert await data_source.ingest_seed(entities, refs) == 2
        assert await data_source.find_references_count("user", "roles", "u-1", "role") == 1

    async def test_existing_ids_skipped(self, data_source: InMemoryDataSource) -> None:
        await data_source.create("user", {"name": "Original"}, id="u-1")

        inserted = await data_source.ingest_seed(
            [EntityObject(id="u-1", model_name="user", values={"name": "Seed"})], []
        )

        assert inserted == 0
        existing = await data_source.find_one("u-1")
        assert existing is not None
        assert existing.values["name"] == "Original"

    async def test_bad_reference_rejects_whole_batch(
        self, data_source: InMemoryDataSource
    ) -> None:
        entities = [EntityObject(id="u-1", model_name="user")]
        refs = [
            EntityObjectReference(
                from_model_name="user",
                from_field_name="roles",
                from_object_id="u-1",
                to_model_name="role",
                to_object_id="ghost",
            )
        ]

        with pytest.raises(SeedIngestionError):
            await data_source.ingest_seed(entities, refs)

        assert await data_source.find_one("u-1") is None

    async def test_object_without_model_rejected(self, data_source: InMemoryDataSource) -> None:
        with pytest.raises(SeedIngestionError):
            await data_source.ingest_seed([EntityObject(id="x", model_name="")], [])


class TestDataSourceFactory:
    def test_builds_once(self) -> None:
        factory = DataSourceFactory()

        first = factory.get_data_source()
        assert isinstance(first, InMemoryDataSource)
        assert factory.get_data_source() is first

    def test_custom_builder_and_override(self) -> None:
        built: list[InMemoryDataSource] = []

        def builder() -> InMemoryDataSource:
            built.append(InMemoryDataSource())
            return built[-1]

        factory = DataSourceFactory(builder)
        assert factory.get_data_source() is built[0]

        replacement = InMemoryDataSource()
        factory.set_data_source(replacement)
        assert factory.get_data_source() is replacement
        assert len(built) == 1

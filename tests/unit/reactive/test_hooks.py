"""Tests for deriving subscription factories from a data source."""

from __future__ import annotations

import pytest

from mosaic.datasource import DATA_SOURCE_OPERATIONS, EntityQuery, InMemoryDataSource
from mosaic.exceptions import RegistrationError
from mosaic.reactive import DataSubscription, HookFactory, to_data_source_hooks


class CustomSource:
    __operations__ = ("find_tags",)

    async def find_tags(self, prefix: str = "") -> list[str]:
        return [t for t in ("alpha", "beta") if t.startswith(prefix)]

    async def _internal(self) -> None:
        return None

    def sync_helper(self) -> int:
        return 1


class TestToDataSourceHooks:
    """Tests for the operation manifest."""

    def test_default_manifest(self, data_source: InMemoryDataSource) -> None:
        hooks = to_data_source_hooks(data_source)

        assert list(hooks) == list(DATA_SOURCE_OPERATIONS)
        assert isinstance(hooks["find_many"], HookFactory)
        assert hooks.find_many is hooks["find_many"]
        assert "ingest_seed" not in hooks
        assert "save_plain_config" not in hooks

    def test_unknown_attribute(self, data_source: InMemoryDataSource) -> None:
        hooks = to_data_source_hooks(data_source)

        with pytest.raises(AttributeError):
            _ = hooks.ingest_seed

    def test_manifest_attribute_used(self) -> None:
        hooks = to_data_source_hooks(CustomSource())

        assert list(hooks) == ["find_tags"]

    @pytest.mark.parametrize(
        ("operations", "message"),
        [
            (["_internal"], "private"),
            (["find_nothing"], "no operation"),
            (["sync_helper"], "not a coroutine"),
        ],
    )
    def test_invalid_operations_rejected(self, operations: list[str], message: str) -> None:
        with pytest.raises(RegistrationError, match=message):
            to_data_source_hooks(CustomSource(), operations)


class TestHookFactory:
    async def test_creates_bound_subscription(self, data_source: InMemoryDataSource) -> None:
        await data_source.create("customer", {"name": "Acme"})
        hooks = to_data_source_hooks(data_source)

        sub = hooks.find_many(
            {"model_name": "customer", "query": EntityQuery(page_size=10)},
            select=lambda result: result.count,
        )
        assert isinstance(sub, DataSubscription)
        assert sub.name == "find_many"

        state = await sub.start().wait()
        assert state.data == 1

    async def test_positional_input(self) -> None:
        hooks = to_data_source_hooks(CustomSource())

        state = await hooks.find_tags("al").start().wait()
        assert state.data == ["alpha"]

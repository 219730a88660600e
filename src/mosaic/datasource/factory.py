"""Lazily built, shared data source per engine."""

from __future__ import annotations

from collections.abc import Callable

from mosaic.datasource.base import DataSource
from mosaic.datasource.memory import InMemoryDataSource

__all__ = ["DataSourceFactory"]


class DataSourceFactory:
    """Builds the engine's data source on first use and reuses it.

    Args:
        builder: Zero-argument callable producing the data source. Defaults
            to :class:`InMemoryDataSource`.
    """

    def __init__(self, builder: Callable[[], DataSource] | None = None) -> None:
        self._builder: Callable[[], DataSource] = builder or InMemoryDataSource
        self._instance: DataSource | None = None

    def get_data_source(self) -> DataSource:
        if self._instance is None:
            self._instance = self._builder()
        return self._instance

    def set_data_source(self, data_source: DataSource) -> None:
        self._instance = data_source

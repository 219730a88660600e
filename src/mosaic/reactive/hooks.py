"""Derive one reactive subscription factory per data source operation."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from mosaic.datasource.base import DATA_SOURCE_OPERATIONS
from mosaic.exceptions import RegistrationError
from mosaic.reactive.subscription import DataSubscription

__all__ = ["DataSourceHooks", "HookFactory", "to_data_source_hooks"]


@dataclass(frozen=True, slots=True)
class HookFactory:
    """Creates subscriptions bound to one named operation."""

    name: str
    operation: Callable[..., Awaitable[Any]]

    def __call__(
        self,
        input: Any = None,
        *,
        enabled: bool = True,
        select: Callable[[Any], Any] | None = None,
        keep_previous_data: bool = False,
    ) -> DataSubscription:
        return DataSubscription(
            self.name,
            self.operation,
            input,
            enabled=enabled,
            select=select,
            keep_previous_data=keep_previous_data,
        )


class DataSourceHooks(Mapping[str, HookFactory]):
    """Operation name to :class:`HookFactory`, also reachable as attributes."""

    def __init__(self, factories: dict[str, HookFactory]) -> None:
        self._factories = factories

    def __getitem__(self, name: str) -> HookFactory:
        return self._factories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __getattr__(self, name: str) -> HookFactory:
        try:
            return self.__dict__["_factories"][name]
        except KeyError:
            raise AttributeError(name) from None


def to_data_source_hooks(
    data_source: object, operations: Sequence[str] | None = None
) -> DataSourceHooks:
    """Build subscription factories from an explicit operation manifest.

    Args:
        data_source: Object exposing the operations as coroutine methods.
        operations: Names to expose. Defaults to the data source's
            ``__operations__`` attribute, else ``DATA_SOURCE_OPERATIONS``.

    Raises:
        RegistrationError: If a name is private (leading underscore),
            missing, or not a coroutine function.
    """
    if operations is None:
        operations = getattr(data_source, "__operations__", None) or DATA_SOURCE_OPERATIONS

    factories: dict[str, HookFactory] = {}
    for name in operations:
        if name.startswith("_"):
            raise RegistrationError(
                f"Operation '{name}' is private and cannot be exposed", kind="operation"
            )
        attr = getattr(data_source, name, None)
        if attr is None:
            raise RegistrationError(
                f"Data source has no operation '{name}'", kind="operation"
            )
        if not inspect.iscoroutinefunction(attr):
            raise RegistrationError(
                f"Operation '{name}' is not a coroutine function", kind="operation"
            )
        factories[name] = HookFactory(name, attr)
    return DataSourceHooks(factories)

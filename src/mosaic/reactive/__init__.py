"""Reactive subscriptions derived from data source operations."""

from __future__ import annotations

from mosaic.reactive.hooks import DataSourceHooks, HookFactory, to_data_source_hooks
from mosaic.reactive.subscription import DataSubscription, SubscriptionState

__all__ = [
    "DataSourceHooks",
    "DataSubscription",
    "HookFactory",
    "SubscriptionState",
    "to_data_source_hooks",
]

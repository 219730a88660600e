"""Model and view metadata: types, field typers, delegates and registry."""

from __future__ import annotations

from mosaic.meta.delegates import ModelDelegate, ViewDelegate
from mosaic.meta.fieldtypes import FieldTyper, FieldTyperRegistry
from mosaic.meta.registry import MetaRegistry
from mosaic.meta.serializer import canonical_json, dump_snapshot, load_snapshot
from mosaic.meta.types import (
    ConfigSnapshot,
    EntityField,
    EntityModel,
    EntityObject,
    EntityObjectReference,
    EntityView,
    FieldType,
    QueryMeta,
    QueryOperator,
    ViewField,
    ViewPanel,
    is_relation,
    is_to_many,
    is_to_one,
)

__all__ = [
    "ConfigSnapshot",
    "EntityField",
    "EntityModel",
    "EntityObject",
    "EntityObjectReference",
    "EntityView",
    "FieldType",
    "FieldTyper",
    "FieldTyperRegistry",
    "MetaRegistry",
    "ModelDelegate",
    "QueryMeta",
    "QueryOperator",
    "ViewDelegate",
    "ViewField",
    "ViewPanel",
    "canonical_json",
    "dump_snapshot",
    "is_relation",
    "is_to_many",
    "is_to_one",
    "load_snapshot",
]

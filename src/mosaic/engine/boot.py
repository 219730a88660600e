"""Boot sequence: initializer, module application, configuration sync, seal."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mosaic.components.widgets import WidgetSuite
from mosaic.exceptions import ModuleApplyError, SeedIngestionError
from mosaic.logging import get_logger
from mosaic.meta.types import EntityObject, EntityObjectReference
from mosaic.modules.types import (
    ComponentContributions,
    ConfigContributions,
    DataContributions,
    Module,
)

if TYPE_CHECKING:
    from mosaic.engine.engine import Engine

__all__ = [
    "BootState",
    "BootWatcher",
    "EngineInitializer",
    "apply_module",
    "boot_engine",
    "sync_config",
]

logger = get_logger(__name__)


class BootState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    MODULES_APPLYING = "modules_applying"
    CONFIG_SYNCED = "config_synced"
    READY = "ready"
    FAILED = "failed"


BootListener = Callable[[BootState], None]


class BootWatcher:
    """Tracks boot progress and notifies listeners of every transition."""

    def __init__(self) -> None:
        self.state = BootState.UNINITIALIZED
        self.history: list[BootState] = [BootState.UNINITIALIZED]
        self._listeners: list[BootListener] = []

    def subscribe(self, listener: BootListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def transition(self, state: BootState) -> None:
        logger.debug("boot_state_changed", previous=self.state.value, state=state.value)
        self.state = state
        self.history.append(state)
        for listener in list(self._listeners):
            listener(state)

    @property
    def is_ready(self) -> bool:
        return self.state is BootState.READY


@runtime_checkable
class EngineInitializer(Protocol):
    """Configures a fresh engine before modules apply.

    Typical work: adjust ``engine.settings``, register modules, suite
    adapters, renderers, field typers, a data source or a session provider.
    """

    async def init(self, engine: Engine) -> None: ...


# =============================================================================
# Module application
# =============================================================================


async def _apply_config(engine: Engine, module: Module) -> None:
    config = ConfigContributions()
    await module.setup_config(config)
    for model in config.models:
        engine.meta_registry.register_model(model)
    for view in config.views:
        engine.meta_registry.register_view(view)
    for binding in config.event_handlers:
        for name in binding.names:
            engine.events.register_listener(name, binding.listener)
    for handler in config.action_handlers:
        engine.actions.register_action_handler(handler)
    for request_handler in config.request_handlers:
        engine.actions.register_request_handler(request_handler)
    for servlet in config.servlets:
        engine.servlets.register(servlet)


def _seed_references(module_name: str, data: DataContributions) -> list[EntityObjectReference]:
    by_id = {entity.id: entity for entity in data.entities}
    references: list[EntityObjectReference] = []
    for entity in data.entities:
        for ref in entity.references:
            target = by_id.get(ref.to_object_id)
            if target is None:
                logger.warning(
                    "seed_reference_target_missing",
                    module_name=module_name,
                    from_object_id=entity.id,
                    to_object_id=ref.to_object_id,
                )
                continue
            references.append(
                EntityObjectReference(
                    from_model_name=entity.model_name,
                    from_field_name=ref.from_field_name,
                    from_object_id=entity.id,
                    to_model_name=target.model_name,
                    to_object_id=target.id,
                )
            )
    return references


async def _apply_data(engine: Engine, module: Module) -> None:
    name = module.info.name
    data = DataContributions()
    await module.setup_data(data)
    if not data.entities:
        return
    entities = [
        EntityObject(id=e.id, model_name=e.model_name, values=dict(e.values))
        for e in data.entities
    ]
    try:
        inserted = await engine.data_source.ingest_seed(entities, _seed_references(name, data))
    except SeedIngestionError as e:
        logger.error("seed_ingestion_failed", module_name=name, error=e.message)
        return
    logger.info("seed_ingested", module_name=name, inserted=inserted, offered=len(entities))


async def _apply_components(engine: Engine, module: Module) -> None:
    registry = engine.component_registry
    components = ComponentContributions()
    await module.setup_components(components)
    for view in components.views:
        registry.register_view(view)
    for adapter in components.adapters:
        registry.register_adapter(adapter)
    if components.widgets:
        registry.register_adapter(
            WidgetSuite(module.info.name, module.info.version, components.widgets)
        )
    for renderer in components.renderers:
        registry.register_renderer(renderer)


async def apply_module(engine: Engine, module: Module) -> bool:
    """Apply one module's phases for the engine's tier.

    A failing config phase skips the rest of the module. Contributions
    merged before the failure stay registered.

    Returns:
        ``True`` when every phase applied.
    """
    name = module.info.name
    try:
        await _apply_config(engine, module)
    except Exception as e:
        error = ModuleApplyError(name, "config", e)
        logger.exception("module_apply_failed", module_name=name, phase="config", error=error.message)
        return False

    phase, apply = (
        ("data", _apply_data) if engine.settings.is_service else ("components", _apply_components)
    )
    try:
        await apply(engine, module)
    except Exception as e:
        error = ModuleApplyError(name, phase, e)
        logger.exception("module_apply_failed", module_name=name, phase=phase, error=error.message)
        return False
    logger.debug("module_applied", module_name=name, tier=engine.settings.tier)
    return True


# =============================================================================
# Configuration sync
# =============================================================================


async def sync_config(engine: Engine) -> None:
    """Pull (presentation) or push (service) the persisted configuration."""
    data_source = engine.data_source
    persisted = await data_source.find_plain_config()
    if engine.settings.is_service:
        if engine.meta_registry.differs_from(persisted):
            await data_source.save_plain_config(engine.meta_registry.to_snapshot())
            logger.info("config_snapshot_pushed")
        else:
            logger.debug("config_snapshot_unchanged")
    elif persisted is not None:
        engine.meta_registry.merge_snapshot(persisted)
        logger.info(
            "config_snapshot_pulled",
            models=len(persisted.models),
            views=len(persisted.views),
        )


async def boot_engine(engine: Engine, initializer: EngineInitializer) -> Engine:
    """Run the full boot sequence on ``engine``.

    Raises:
        Exception: Whatever the initializer or the configuration sync
            raised; the watcher ends in ``FAILED``.
    """
    from mosaic.modules.builtin import BuiltinModule

    watcher = engine.boot_watcher
    try:
        watcher.transition(BootState.INITIALIZING)
        engine.module_registry.register_module(BuiltinModule())
        await initializer.init(engine)

        watcher.transition(BootState.MODULES_APPLYING)
        for module in engine.module_registry.modules:
            await apply_module(engine, module)

        await sync_config(engine)
        watcher.transition(BootState.CONFIG_SYNCED)

        engine.seal()
        watcher.transition(BootState.READY)
    except Exception:
        logger.exception("engine_boot_failed", state=watcher.state.value)
        watcher.transition(BootState.FAILED)
        raise
    logger.info("engine_ready", engine=repr(engine))
    return engine

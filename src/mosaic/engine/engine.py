"""The engine: one object holding every registry of a running system."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mosaic import __version__
from mosaic.actions.registry import ActionRegistry
from mosaic.actions.types import ActionResult, EntityAction
from mosaic.components.registry import ComponentRegistry
from mosaic.constants import HttpMethod
from mosaic.datasource.base import DataSource
from mosaic.datasource.factory import DataSourceFactory
from mosaic.engine.boot import BootWatcher
from mosaic.engine.settings import EngineSettings
from mosaic.events.registry import EventRegistry
from mosaic.logging import get_logger
from mosaic.meta.fieldtypes import FieldTyperRegistry
from mosaic.meta.registry import MetaRegistry
from mosaic.modules.registry import ModuleRegistry
from mosaic.servlets.registry import ServletRegistry
from mosaic.servlets.types import HttpResponse, ServletRequest, ServletResponse
from mosaic.session.manager import SessionManager

if TYPE_CHECKING:
    from mosaic.routing.resolver import ActionResolver

__all__ = ["Engine"]

logger = get_logger(__name__)


class Engine:
    """Registries, settings and services of one environment.

    Engines are normally obtained through :func:`mosaic.engine.get_engine`,
    which boots them exactly once. Building one directly is useful in
    tests and tools.

    Attributes:
        settings: Tier, endpoint and authentication settings.
        field_typers: Field typers by type name.
        meta_registry: Models and views.
        module_registry: Modules in registration order.
        data_source_factory: Supplies the data source.
        events: Entity event listeners.
        actions: Action and request handlers.
        servlets: Servlets by path.
        session_manager: Current session lookup.
        component_registry: View components, suites, renderers, controllers.
        boot_watcher: Boot progress of this engine.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        data_source_factory: DataSourceFactory | None = None,
        *,
        component_registry: ComponentRegistry | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.field_typers = FieldTyperRegistry()
        self.events = EventRegistry()
        self.meta_registry = MetaRegistry(self.field_typers, emit=self.events.emit)
        self.module_registry = ModuleRegistry()
        self.data_source_factory = data_source_factory or DataSourceFactory()
        self.actions = ActionRegistry()
        self.servlets = ServletRegistry()
        self.session_manager = SessionManager()
        self.component_registry = component_registry or ComponentRegistry()
        self.boot_watcher = BootWatcher()
        self.created_at = time.time()
        self.version = __version__

    def __repr__(self) -> str:
        return (
            f"Engine(models={len(self.meta_registry.models)}, "
            f"views={len(self.meta_registry.views)}, "
            f"field_typers={len(self.field_typers.list_types())}, "
            f"view_components={len(self.component_registry.views)}, "
            f"adapters={len(self.component_registry.adapters)}, "
            f"state={self.boot_watcher.state.value})"
        )

    @property
    def data_source(self) -> DataSource:
        return self.data_source_factory.get_data_source()

    # -------------------------------------------------------------------------
    # Sealing
    # -------------------------------------------------------------------------

    def seal(self) -> None:
        """Reject further model, view and component registrations."""
        self.meta_registry.seal()
        self.component_registry.seal()
        logger.debug("engine_sealed")

    @property
    def is_sealed(self) -> bool:
        return self.meta_registry.is_sealed and self.component_registry.is_sealed

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    def resolver(self) -> ActionResolver:
        """An action resolver bound to this engine's registries."""
        from mosaic.routing.resolver import ActionResolver

        return ActionResolver.for_engine(self)

    async def perform(self, action: EntityAction) -> ActionResult:
        return await self.actions.dispatch(action, self)

    async def handle_request(
        self,
        method: HttpMethod,
        path: str,
        body: Any = None,
        query: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Dispatch ``<endpoint>/servlet/<first>/<rest>`` to the servlet at ``/<first>``.

        Returns:
            The servlet's response, 404 for unknown routes, 500 when the
            servlet fails or writes nothing.
        """
        prefix = self.settings.servlet_prefix
        if not (path == prefix or path.startswith(prefix + "/")):
            return HttpResponse(status=404, body="Not Found")
        first, _, rest = path[len(prefix) :].lstrip("/").partition("/")
        servlet = self.servlets.get("/" + first, method) if first else None
        if servlet is None:
            logger.debug("servlet_not_found", method=method, path=path)
            return HttpResponse(status=404, body="Not Found")

        request = ServletRequest(
            method=method, path="/" + rest, engine=self, body=body, query=dict(query or {})
        )
        response = ServletResponse()
        try:
            await servlet.handle(request, response)
        except Exception:
            logger.exception("servlet_failed", servlet=servlet.path, method=method, path=path)
            return HttpResponse(status=500, body="Internal Server Error")
        result = response.read()
        if result is None:
            logger.warning("servlet_wrote_nothing", servlet=servlet.path)
            return HttpResponse(status=500, body="Internal Server Error")
        return result

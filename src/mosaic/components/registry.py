"""Registry of view components, suites, renderers and view controllers."""

from __future__ import annotations

from collections.abc import Callable

from mosaic.components.types import (
    EntityWidget,
    NamedRenderer,
    SuiteAdapter,
    ViewComponent,
    ViewController,
)
from mosaic.constants import BUILTIN_SUITE_NAME
from mosaic.exceptions import RegistrationError, RegistrySealedError
from mosaic.logging import get_logger

__all__ = ["ComponentRegistry"]

logger = get_logger(__name__)

ViewLoader = Callable[[], ViewComponent]


class ComponentRegistry:
    """Name-keyed registry of everything the presentation tier renders.

    - View components by view type, with lazy loaders.
    - Suite adapters by suite name; widget lookup falls back to the
      built-in suite.
    - Named renderers (first registration of a name wins), grouped by slot.
    - View controllers by view id.

    Components are registered during boot; after :meth:`seal` every
    registration raises :class:`RegistrySealedError`. View controllers
    belong to mounted views and stay mutable.

    Args:
        builtins: Register the built-in view components and suite.
    """

    def __init__(self, *, builtins: bool = True) -> None:
        self._views: dict[str, ViewComponent] = {}
        self._view_loaders: dict[str, ViewLoader] = {}
        self._adapters: dict[str, SuiteAdapter] = {}
        self._renderers: list[NamedRenderer] = []
        self._controllers: dict[str, ViewController] = {}
        self._sealed = False

        if builtins:
            from mosaic.components.builtin import BUILTIN_VIEW_COMPONENTS, BuiltinSuiteAdapter

            for component in BUILTIN_VIEW_COMPONENTS:
                self.register_view(component)
            self.register_adapter(BuiltinSuiteAdapter())

    # -------------------------------------------------------------------------
    # Sealing
    # -------------------------------------------------------------------------

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        self._sealed = True

    def _check_mutable(self, operation: str) -> None:
        if self._sealed:
            raise RegistrySealedError("ComponentRegistry", operation)

    # -------------------------------------------------------------------------
    # View components
    # -------------------------------------------------------------------------

    def register_view(self, component: ViewComponent) -> None:
        self._check_mutable("register_view")
        if not component.info.name:
            raise RegistrationError("View component must have a name", kind="view_component")
        self._views[component.info.name] = component

    def register_view_loader(self, view_type: str, loader: ViewLoader) -> None:
        """Defer building the component for ``view_type`` until first lookup."""
        self._check_mutable("register_view_loader")
        self._view_loaders[view_type] = loader

    def get_view(self, view_type: str) -> ViewComponent | None:
        component = self._views.get(view_type)
        if component is not None:
            return component
        loader = self._view_loaders.pop(view_type, None)
        if loader is None:
            return None
        component = loader()
        self._views[view_type] = component
        logger.debug("view_component_loaded", view_type=view_type)
        return component

    @property
    def views(self) -> list[ViewComponent]:
        return list(self._views.values())

    # -------------------------------------------------------------------------
    # Suites and widgets
    # -------------------------------------------------------------------------

    def register_adapter(self, adapter: SuiteAdapter) -> None:
        self._check_mutable("register_adapter")
        self._adapters[adapter.suite_name] = adapter

    def get_adapter(self, suite_name: str) -> SuiteAdapter | None:
        return self._adapters.get(suite_name)

    @property
    def adapters(self) -> list[SuiteAdapter]:
        return list(self._adapters.values())

    def get_widget(
        self, widget_name: str, suite_name: str | None = None
    ) -> EntityWidget | None:
        """Look up a widget in ``suite_name``, then in the built-in suite."""
        if suite_name:
            adapter = self._adapters.get(suite_name)
            widget = adapter.get_widget(widget_name) if adapter else None
            if widget is not None:
                return widget
        builtin = self._adapters.get(BUILTIN_SUITE_NAME)
        return builtin.get_widget(widget_name) if builtin else None

    # -------------------------------------------------------------------------
    # Named renderers
    # -------------------------------------------------------------------------

    def register_renderer(self, renderer: NamedRenderer) -> None:
        self._check_mutable("register_renderer")
        if any(r.name == renderer.name for r in self._renderers):
            logger.debug("renderer_already_registered", name=renderer.name)
            return
        self._renderers.append(renderer)

    def get_renderer(self, name: str) -> NamedRenderer | None:
        return next((r for r in self._renderers if r.name == name), None)

    def get_renderers_by_slot(self, slot_name: str) -> list[NamedRenderer]:
        return [r for r in self._renderers if r.slot_name == slot_name and not r.disabled]

    @property
    def renderers(self) -> list[NamedRenderer]:
        return list(self._renderers)

    # -------------------------------------------------------------------------
    # View controllers
    # -------------------------------------------------------------------------

    def register_view_controller(self, controller: ViewController) -> None:
        self._controllers[controller.view_id] = controller

    def unregister_view_controller(self, view_id: str) -> None:
        self._controllers.pop(view_id, None)

    def get_view_controller(
        self,
        model_name: str | None = None,
        view_type: str | None = None,
        view_id: str | None = None,
    ) -> ViewController | None:
        """Find a controller by id, else the first matching model and view type."""
        if view_id:
            return self._controllers.get(view_id)
        return next(
            (
                c
                for c in self._controllers.values()
                if (not model_name or c.model_name == model_name)
                and (not view_type or c.view_type == view_type)
            ),
            None,
        )

    @property
    def view_controllers(self) -> list[ViewController]:
        return list(self._controllers.values())

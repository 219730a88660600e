"""ViewContainer: the textual widget hosting one routing scope."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from textual.app import ComposeResult
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Static

from mosaic.components.builtin import (
    EntityDashboard,
    EntityGrid,
    EntityKanban,
    ObjectSaved,
)
from mosaic.components.types import ViewBehavior, ViewProps
from mosaic.constants import VIEW_INSPECTOR_SLOT
from mosaic.datasource.query import ReferenceScope
from mosaic.logging import get_logger
from mosaic.modules.builtin import AuthForm
from mosaic.routing.resolver import ActionResolver
from mosaic.routing.scope import ContainerScope
from mosaic.routing.types import (
    Action,
    BroadcastData,
    ComponentResolution,
    DefaultResolution,
    Diagnostic,
    HiddenResolution,
    Resolution,
    ViewResolution,
)
from mosaic.session.types import StaticSessionProvider

__all__ = ["ViewContainer"]

logger = get_logger(__name__)

_COLLECTION_VIEWS = (EntityGrid, EntityKanban, EntityDashboard)


class ViewContainer(Widget):
    """Renders whatever the latest action routed to its scope resolves to.

    A container nested inside another one gets a child scope of the
    outer container's scope, or shares it with ``share_scope=True``.
    The outermost container owns the root scope and must be given a
    resolver; nested containers inherit it.

    Messages Emitted:
        Resolved: After every resolution is applied.

    Example:
        ```python
        class CrmApp(App):
            def compose(self) -> ComposeResult:
                yield ViewContainer(
                    Action(action_type="view", payload={"modelName": "customer", "viewType": "mastail"}),
                    resolver=engine.resolver(),
                )
        ```
    """

    DEFAULT_CSS = """
    ViewContainer {
        height: auto;
    }

    ViewContainer > .diagnostic {
        color: $error;
        border: round $error;
        padding: 0 1;
    }
    """

    resolution: reactive[Resolution | None] = reactive(None, recompose=True, always_update=True)

    class Resolved(Message):
        """Posted when the container applied a new resolution."""

        def __init__(self, container: ViewContainer, resolution: Resolution) -> None:
            self.container = container
            self.resolution = resolution
            super().__init__()

    def __init__(
        self,
        initial_action: Action | None = None,
        *,
        name: str | None = None,
        model_name: str | None = None,
        share_scope: bool = False,
        default: Callable[[], Widget] | str | None = None,
        resolver: ActionResolver | None = None,
        scope: ContainerScope | None = None,
        behavior: ViewBehavior | None = None,
        reference: ReferenceScope | None = None,
        view_options: dict[str, Any] | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.initial_action = initial_action
        self.model_name = model_name
        self.share_scope = share_scope
        self.default = default
        self.behavior = behavior
        self.reference = reference
        self.view_options = view_options
        self._resolver = resolver
        self._scope = scope
        self._owns_scope = False
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def scope(self) -> ContainerScope:
        if self._scope is None:
            raise RuntimeError("ViewContainer has no scope before it is mounted")
        return self._scope

    @property
    def resolver(self) -> ActionResolver:
        if self._resolver is None:
            raise RuntimeError("ViewContainer has no resolver")
        return self._resolver

    def _outer_container(self) -> ViewContainer | None:
        return next((a for a in self.ancestors if isinstance(a, ViewContainer)), None)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def on_mount(self) -> None:
        outer = self._outer_container()
        if self._resolver is None and outer is not None:
            self._resolver = outer.resolver
        if self._scope is None:
            if outer is None:
                self._scope = ContainerScope(model_name=self.model_name)
            elif self.share_scope:
                self._scope = outer.scope
            else:
                self._scope = outer.scope.child(self.name, model_name=self.model_name)
            self._owns_scope = not self.share_scope
        self._unsubscribers.append(self.scope.on_action(self._on_scope_action))
        self._unsubscribers.append(self.scope.on_broadcast(self._on_scope_broadcast))
        if self.initial_action is not None:
            self.scope.perform_action(self.initial_action.retargeted_to_self())
        else:
            self._schedule_resolve(None)

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self._owns_scope and self._scope is not None and not self._scope.is_root:
            self._scope.close()

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def perform_action(self, action: Action) -> None:
        """Route ``action`` from this container's scope."""
        self.scope.perform_action(action)

    def _on_scope_action(self, action: Action) -> None:
        self._schedule_resolve(action)

    def _schedule_resolve(self, action: Action | None) -> None:
        self.run_worker(self._resolve(action), exclusive=True, group="resolve")

    async def _resolve(self, action: Action | None) -> None:
        resolution = await self.resolver.resolve(
            action,
            scope=self.scope,
            model_name=self.model_name,
            behavior=self.behavior,
            reference=self.reference,
            default=self.default,
            view_options=self.view_options,
            opens_scope=not self.share_scope,
        )
        self.resolution = resolution
        self.post_message(self.Resolved(self, resolution))

    def _on_scope_broadcast(self, data: BroadcastData) -> None:
        logger.debug("container_broadcast_received", container=self.scope.name, kind=data.kind)
        for view in self.query("*"):
            if isinstance(view, _COLLECTION_VIEWS):
                self.run_worker(view.load(), group="refresh")

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def compose(self) -> ComposeResult:
        resolution = self.resolution
        if isinstance(resolution, ViewResolution):
            yield resolution.component.build(
                ViewProps(
                    model=resolution.model,
                    view=resolution.view,
                    behavior=resolution.behavior,
                    base_object_id=resolution.base_object_id,
                    reference=resolution.reference,
                    data_source=self.resolver.data_source,
                    components=self.resolver.components,
                    opens_scope=resolution.opens_scope,
                )
            )
        elif isinstance(resolution, ComponentResolution):
            yield resolution.renderer.renderer()
        elif isinstance(resolution, Diagnostic):
            yield Static(resolution.message, classes="diagnostic")
        elif isinstance(resolution, DefaultResolution):
            default = resolution.default
            if callable(default):
                yield default()
            elif isinstance(default, str):
                yield Static(default, classes="default")
        elif isinstance(resolution, HiddenResolution) or resolution is None:
            return

        if self._resolver is not None:
            for renderer in self.resolver.components.get_renderers_by_slot(VIEW_INSPECTOR_SLOT):
                yield renderer.renderer()

    # -------------------------------------------------------------------------
    # Messages from rendered views
    # -------------------------------------------------------------------------

    def on_object_saved(self, event: ObjectSaved) -> None:
        event.stop()
        self.scope.broadcast("created" if event.created else "updated", event.obj)

    def on_auth_form_authenticated(self, event: AuthForm.Authenticated) -> None:
        event.stop()
        logger.info("session_authenticated", user_id=event.user_info.id)
        self.resolver.session_manager.set_provider(StaticSessionProvider(event.user_info))
        self._schedule_resolve(self.scope.current_action)

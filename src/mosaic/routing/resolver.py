"""Resolve declarative actions into concrete view and component resolutions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mosaic.components.registry import ComponentRegistry
from mosaic.components.types import ViewBehavior
from mosaic.constants import AUTH_VIEW_TYPE, DEFAULT_MODEL_NAME
from mosaic.datasource.base import DataSource
from mosaic.datasource.query import EntityQuery, ReferenceScope
from mosaic.exceptions import ConfigurationError
from mosaic.logging import get_logger
from mosaic.meta.registry import MetaRegistry
from mosaic.meta.types import is_relation, is_to_one
from mosaic.routing.scope import ContainerScope
from mosaic.routing.types import (
    Action,
    ComponentResolution,
    DefaultResolution,
    Diagnostic,
    HiddenResolution,
    Resolution,
    ViewResolution,
)
from mosaic.session.manager import SessionManager

if TYPE_CHECKING:
    from mosaic.engine.engine import Engine

__all__ = ["ActionResolver", "new_object_id"]

logger = get_logger(__name__)


def new_object_id() -> str:
    """Fresh, non-empty identifier for an object about to be created."""
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class _ViewRequest:
    model_name: str
    view_type: str
    view_name: str | None
    behavior: ViewBehavior
    base_object_id: str | None = None
    reference: ReferenceScope | None = None


def _mode_behavior(payload: dict[str, Any], behavior: ViewBehavior) -> tuple[ViewBehavior, str | None]:
    """Behavior and reserved id implied by ``payload["mode"]``."""
    mode = payload.get("mode")
    if mode == "create":
        object_id = new_object_id()
        return ViewBehavior(mode="edit", to_creating=True, to_creating_id=object_id), object_id
    if mode == "edit":
        return ViewBehavior(mode="edit"), None
    return behavior, None


class ActionResolver:
    """Turns an :class:`Action` into the :class:`Resolution` a container renders.

    Configuration problems never raise out of :meth:`resolve`; they become
    :class:`Diagnostic` resolutions rendered inline.

    Example:
        ```python
        resolver = ActionResolver.for_engine(engine)
        resolution = await resolver.resolve(
            Action(action_type="view", payload={"modelName": "customer", "viewType": "grid"}),
            scope=root_scope,
        )
        ```
    """

    def __init__(
        self,
        meta: MetaRegistry,
        components: ComponentRegistry,
        data_source: DataSource,
        *,
        session_manager: SessionManager | None = None,
        authentication_enabled: bool = False,
    ) -> None:
        self.meta = meta
        self.components = components
        self.data_source = data_source
        self.session_manager = session_manager or SessionManager()
        self.authentication_enabled = authentication_enabled

    @classmethod
    def for_engine(cls, engine: Engine) -> ActionResolver:
        return cls(
            engine.meta_registry,
            engine.component_registry,
            engine.data_source,
            session_manager=engine.session_manager,
            authentication_enabled=engine.settings.authentication_enabled,
        )

    async def resolve(
        self,
        action: Action | None,
        *,
        scope: ContainerScope | None = None,
        model_name: str | None = None,
        behavior: ViewBehavior | None = None,
        reference: ReferenceScope | None = None,
        default: Any = None,
        view_options: dict[str, Any] | None = None,
        opens_scope: bool = True,
    ) -> Resolution:
        """Resolve ``action`` in the context of a container.

        Args:
            action: Action to resolve; ``None`` yields the default content.
            scope: Routing scope of the container (supplies its model).
            model_name: Model of the container, overriding the scope's.
            behavior: Behavior the container was given.
            reference: Reference the container was given.
            default: Container's default content.
            view_options: Options replacing the view's own.
            opens_scope: ``False`` when the container shares its parent's scope.
        """
        behavior = behavior or ViewBehavior()

        if self.authentication_enabled:
            session = await self.session_manager.get_session()
            if not session.is_authenticated():
                logger.debug("authentication_required")
                return self._validate(
                    _ViewRequest(DEFAULT_MODEL_NAME, AUTH_VIEW_TYPE, None, behavior, None, reference),
                    opens_scope=False,
                    view_options=None,
                )

        if action is None:
            return DefaultResolution(default)

        container_model = model_name or (scope.container_model_name if scope else None)

        if action.action_type == "view":
            return self._resolve_view(action, behavior, reference, view_options, opens_scope)
        if action.action_type == "comp":
            return self._resolve_component(action, default)
        if action.action_type == "reference-view":
            return await self._resolve_reference_view(
                action, container_model, behavior, default, view_options, opens_scope
            )
        if action.action_type == "hidden":
            return HiddenResolution()
        return DefaultResolution(default)

    # -------------------------------------------------------------------------
    # Action types
    # -------------------------------------------------------------------------

    def _resolve_view(
        self,
        action: Action,
        behavior: ViewBehavior,
        reference: ReferenceScope | None,
        view_options: dict[str, Any] | None,
        opens_scope: bool,
    ) -> Resolution:
        payload = action.payload
        model_name = payload.get("modelName")
        view_type = payload.get("viewType")
        if not model_name or not view_type:
            return self._diagnostic(
                "View action needs 'modelName' and 'viewType' in its payload", "view"
            )
        base_id = action.context_object.id if action.context_object else ""
        behavior, created_id = _mode_behavior(payload, behavior)
        request = _ViewRequest(
            model_name,
            view_type,
            payload.get("viewName"),
            behavior,
            created_id or base_id,
            reference,
        )
        return self._validate(request, opens_scope=opens_scope, view_options=view_options)

    def _resolve_component(self, action: Action, default: Any) -> Resolution:
        name = action.payload.get("comp")
        if not isinstance(name, str):
            return DefaultResolution(default)
        renderer = self.components.get_renderer(name)
        if renderer is None:
            return self._diagnostic(f"The component '{name}' was not found", "renderer")
        return ComponentResolution(renderer)

    async def _resolve_reference_view(
        self,
        action: Action,
        container_model: str | None,
        behavior: ViewBehavior,
        default: Any,
        view_options: dict[str, Any] | None,
        opens_scope: bool,
    ) -> Resolution:
        payload = action.payload
        from_model_name = payload.get("fromModelName") or container_model
        field_name = payload.get("fromFieldName")

        model = self.meta.get_model(from_model_name) if from_model_name else None
        if model is None:
            return self._diagnostic(f"The model '{from_model_name}' was not found", "model")
        field = model.find_field_by_name(field_name) if field_name else None
        if field is None:
            return self._diagnostic(
                f"The field '{field_name}' was not found on model '{model.name}'", "field"
            )
        if not is_relation(field.type):
            return self._diagnostic(
                f"The field '{model.name}.{field.name}' is not a relation", "relation"
            )

        from_object_id = action.context_object.id if action.context_object else None
        if not from_object_id:
            return DefaultResolution(default)

        to_model_name = payload.get("toModelName") or field.ref_model
        if not to_model_name:
            return self._diagnostic(
                f"The field '{model.name}.{field.name}' has no target model", "model"
            )

        scoped = ReferenceScope(
            from_model_name=model.name,
            from_field_name=field.name,
            from_object_id=from_object_id,
            to_model_name=to_model_name,
        )
        behavior, created_id = _mode_behavior(payload, behavior)

        if not is_to_one(field.type):
            request = _ViewRequest(
                to_model_name,
                payload.get("viewType") or "grid",
                payload.get("viewName"),
                behavior,
                created_id,
                scoped,
            )
            return self._validate(request, opens_scope=opens_scope, view_options=view_options)

        result = await self.data_source.find_many(
            to_model_name, EntityQuery(page_index=1, page_size=1, references=scoped)
        )
        view_type = payload.get("viewType") or "form"
        if result.data:
            request = _ViewRequest(
                to_model_name,
                view_type,
                payload.get("viewName"),
                behavior.model_copy(update={"to_creating": None, "to_creating_id": None}),
                result.data[0].id,
                scoped,
            )
        else:
            object_id = created_id or new_object_id()
            request = _ViewRequest(
                to_model_name,
                view_type,
                payload.get("viewName"),
                ViewBehavior(mode="edit", to_creating=True, to_creating_id=object_id),
                object_id,
                scoped,
            )
        return self._validate(request, opens_scope=opens_scope, view_options=view_options)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate(
        self,
        request: _ViewRequest,
        *,
        opens_scope: bool,
        view_options: dict[str, Any] | None,
    ) -> Resolution:
        view = self.meta.find_view(request.model_name, request.view_type, request.view_name)
        if view is None:
            return self._diagnostic(
                f"The view (viewType: {request.view_type}, viewName: {request.view_name}, "
                f"modelName: {request.model_name}) was not found",
                "view",
            )
        component = self.components.get_view(request.view_type)
        if component is None:
            return self._diagnostic(
                f"The view component for viewType: {request.view_type} was not found",
                "view_component",
            )
        model = self.meta.get_model(request.model_name)
        if model is None:
            return self._diagnostic(f"The model {request.model_name} was not found", "model")

        return ViewResolution(
            model=model,
            view=view.to_supplemented_view(view_options),
            component=component,
            behavior=request.behavior,
            base_object_id=request.base_object_id,
            reference=request.reference,
            opens_scope=opens_scope,
        )

    def _diagnostic(self, message: str, missing: str) -> Diagnostic:
        logger.warning("action_resolution_failed", missing=missing, reason=message)
        return Diagnostic(ConfigurationError(message, missing=missing))

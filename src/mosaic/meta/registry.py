"""Registry of models and views merged from every module at boot."""

from __future__ import annotations

from collections.abc import Callable

from mosaic.constants import CONFIG_UPDATED_EVENT, DEFAULT_MODEL_NAME
from mosaic.events import EntityEvent
from mosaic.exceptions import RegistrationError, RegistrySealedError
from mosaic.logging import get_logger
from mosaic.meta.delegates import ModelDelegate, ViewDelegate
from mosaic.meta.fieldtypes import FieldTyperRegistry
from mosaic.meta.serializer import (
    canonical_json,
    dump_snapshot,
    load_snapshot,
    snapshot_to_plain,
)
from mosaic.meta.types import ConfigSnapshot, EntityModel, EntityView, ViewKey

__all__ = ["MetaRegistry"]

logger = get_logger(__name__)

EventSink = Callable[[EntityEvent], object]


class MetaRegistry:
    """Models keyed by name and views keyed by ``(model, view type, name)``.

    Registration is last-write-wins for every key. The registry is mutable
    only while the engine boots; once :meth:`seal` has been called every
    mutating operation raises :class:`RegistrySealedError`.

    Attributes:
        field_typers: Typers used by the delegates this registry hands out.

    Example:
        ```python
        registry = MetaRegistry()
        registry.register_model(EntityModel(name="customer", fields=[...]))
        registry.register_view(EntityView(model_name="customer", view_type="grid"))

        view = registry.find_view("customer", "grid", "compact")  # default grid
        ```
    """

    def __init__(
        self,
        field_typers: FieldTyperRegistry | None = None,
        emit: EventSink | None = None,
    ) -> None:
        self.field_typers = field_typers or FieldTyperRegistry()
        self._emit = emit
        self._models: dict[str, EntityModel] = {}
        self._views: dict[ViewKey, EntityView] = {}
        self._delegates: dict[str, ModelDelegate] = {}
        self._sealed = False

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
            raise RegistrySealedError("MetaRegistry", operation)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_model(self, model: EntityModel) -> None:
        """Register ``model``, replacing any model of the same name.

        Raises:
            RegistrationError: If the model has no name.
            RegistrySealedError: If the registry is sealed.
        """
        self._check_mutable("register_model")
        if not model.name:
            raise RegistrationError("Model must have a name", kind="model")
        if model.name in self._models:
            logger.debug("model_replaced", model=model.name)
        self._models[model.name] = model
        self._delegates.pop(model.name, None)

    def register_view(self, view: EntityView) -> None:
        """Register ``view``, replacing any view with the same key.

        Raises:
            RegistrationError: If ``model_name`` or ``view_type`` is empty.
            RegistrySealedError: If the registry is sealed.
        """
        self._check_mutable("register_view")
        if not view.model_name or not view.view_type:
            raise RegistrationError(
                "View must have a model_name and a view_type", kind="view"
            )
        if view.key in self._views:
            logger.debug(
                "view_replaced",
                model=view.model_name,
                view_type=view.view_type,
                name=view.name,
            )
        self._views[view.key] = view

    def cleanup(self) -> None:
        """Remove every model and view."""
        self._check_mutable("cleanup")
        self._models.clear()
        self._views.clear()
        self._delegates.clear()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_model(self, name: str) -> ModelDelegate | None:
        model = self._models.get(name)
        if model is None:
            return None
        delegate = self._delegates.get(name)
        if delegate is None:
            delegate = ModelDelegate(model, self.field_typers)
            self._delegates[name] = delegate
        return delegate

    def has_model(self, name: str) -> bool:
        return name in self._models

    @property
    def models(self) -> list[ModelDelegate]:
        return [d for d in (self.get_model(name) for name in self._models) if d]

    @property
    def views(self) -> list[ViewDelegate]:
        return [ViewDelegate(v, self, self.field_typers) for v in self._views.values()]

    def find_view(
        self, model_name: str, view_type: str, name: str | None = None
    ) -> ViewDelegate | None:
        """Find a view by exact key, falling back to the unnamed default.

        Returns:
            The named view if registered, else the default view for
            ``(model_name, view_type)``, else ``None``.
        """
        view = self._views.get((model_name, view_type, name))
        if view is None and name is not None:
            view = self._views.get((model_name, view_type, None))
        if view is None:
            return None
        return ViewDelegate(view, self, self.field_typers)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_snapshot(self) -> ConfigSnapshot:
        return ConfigSnapshot(
            models=list(self._models.values()), views=list(self._views.values())
        )

    def to_json_string(self, indent: int | None = None) -> str:
        return dump_snapshot(self.to_snapshot(), indent=indent)

    def from_json_string(self, text: str) -> None:
        """Replace all contents with the models and views in ``text``.

        Invalid entries are skipped. Views whose model is not part of the
        document are skipped unless they belong to the ``__default__``
        pseudo-model.
        """
        snapshot = load_snapshot(text)
        self.cleanup()
        for model in snapshot.models:
            self.register_model(model)
        for view in snapshot.views:
            if view.model_name != DEFAULT_MODEL_NAME and view.model_name not in self._models:
                logger.warning(
                    "view_skipped_missing_model",
                    model=view.model_name,
                    view_type=view.view_type,
                    name=view.name,
                )
                continue
            self.register_view(view)

    def merge_snapshot(self, snapshot: ConfigSnapshot | dict[str, object] | str) -> None:
        """Update-or-register every entry of ``snapshot``.

        Emits a ``config.updated`` event naming the affected models and
        views once the merge is done.
        """
        if not isinstance(snapshot, ConfigSnapshot):
            snapshot = load_snapshot(snapshot)  # type: ignore[arg-type]
        for model in snapshot.models:
            self.register_model(model)
        for view in snapshot.views:
            self.register_view(view)

        logger.info(
            "config_snapshot_merged",
            models=len(snapshot.models),
            views=len(snapshot.views),
        )
        if self._emit is not None:
            self._emit(
                EntityEvent(
                    name=CONFIG_UPDATED_EVENT,
                    parameter={
                        "modelNames": [m.name for m in snapshot.models],
                        "viewKeys": [list(v.key) for v in snapshot.views],
                    },
                )
            )

    def differs_from(self, snapshot: ConfigSnapshot | None) -> bool:
        """Compare with ``snapshot`` by value (canonical JSON)."""
        if snapshot is None:
            return True
        return canonical_json(snapshot_to_plain(self.to_snapshot())) != canonical_json(
            snapshot_to_plain(snapshot)
        )

"""Built-in view components: form, grid, mastail, shell, kanban, dashboard."""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Button, DataTable, Label, Static

from mosaic.components.controllers import BaseViewController
from mosaic.components.types import ComponentInfo, ViewProps, WidgetProps
from mosaic.components.widgets import INPUT_WIDGETS, BuiltinSuiteAdapter, read_widget_value
from mosaic.datasource.query import EntityQuery, ReferenceSource
from mosaic.exceptions import MosaicError
from mosaic.logging import get_logger
from mosaic.meta.types import EntityObject, ViewField, ViewPanel
from mosaic.reactive import (
    DataSourceHooks,
    DataSubscription,
    SubscriptionState,
    to_data_source_hooks,
)

__all__ = [
    "BUILTIN_VIEW_COMPONENTS",
    "BuiltinSuiteAdapter",
    "BuiltinView",
    "EntityDashboard",
    "EntityForm",
    "EntityGrid",
    "EntityKanban",
    "EntityMasterTail",
    "EntityShell",
    "EntityViewWidget",
    "ObjectSaved",
    "ObjectSelected",
]

logger = get_logger(__name__)

_FALLBACK_SUITE = BuiltinSuiteAdapter()


class ObjectSelected(Message):
    """Posted when the user picks an object in a collection view.

    Attributes:
        model_name: Model of the picked object.
        object_id: Identifier of the picked object.
    """

    def __init__(self, model_name: str, object_id: str) -> None:
        self.model_name = model_name
        self.object_id = object_id
        super().__init__()


class ObjectSaved(Message):
    """Posted after a form created or updated its object."""

    def __init__(self, obj: EntityObject, created: bool) -> None:
        self.obj = obj
        self.created = created
        super().__init__()


class EntityViewWidget(Widget):
    """Base widget for built-in views.

    Owns the :class:`ViewProps` and registers a :class:`BaseViewController`
    with the component registry while mounted. Views showing stored data
    return a :class:`DataSubscription` from :meth:`subscribe_data`; it is
    started on mount, feeds :meth:`apply_data_state` and is closed on
    unmount.
    """

    DEFAULT_CSS = """
    EntityViewWidget {
        height: auto;
    }
    """

    def __init__(self, props: ViewProps, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.props = props
        self.view_id = self.id or f"{props.view.view_type}-{uuid.uuid4().hex[:8]}"
        self.controller = BaseViewController(props.model.name, props.view.view_type, self.view_id)
        self.hooks: DataSourceHooks | None = (
            to_data_source_hooks(props.data_source) if props.data_source is not None else None
        )
        self.subscription: DataSubscription | None = None

    @property
    def view_options(self) -> dict[str, Any]:
        return self.props.view.view_options

    def on_mount(self) -> None:
        registry = self.props.components
        if registry is not None:
            registry.register_view_controller(self.controller)
        if self.hooks is not None and self.subscription is None:
            self.subscription = self.subscribe_data(self.hooks)
            if self.subscription is not None:
                self.subscription.subscribe(self.apply_data_state)
                self.subscription.start()

    def on_unmount(self) -> None:
        registry = self.props.components
        if registry is not None:
            registry.unregister_view_controller(self.view_id)
        if self.subscription is not None:
            self.subscription.close()

    def subscribe_data(self, hooks: DataSourceHooks) -> DataSubscription | None:
        """Subscription feeding the view, or ``None`` for views without data."""
        return None

    def apply_data_state(self, state: SubscriptionState) -> None:
        """Reflect a new subscription state in the view."""

    async def load(self) -> None:
        """Fetch whatever the view shows again and wait for the result."""
        if self.subscription is None:
            return
        self.subscription.refetch()
        await self.subscription.wait()


# =============================================================================
# Form
# =============================================================================


class EntityForm(EntityViewWidget):
    """Shows or edits one object field by field.

    Operators: ``form.values`` returns the values currently entered,
    ``form.submit`` saves them.
    """

    DEFAULT_CSS = """
    EntityForm .field-row {
        height: auto;
    }

    EntityForm .field-label {
        width: 20;
        color: $text-muted;
    }

    EntityForm .panel-title {
        text-style: bold;
        margin: 1 0 0 0;
    }
    """

    values: reactive[dict[str, Any] | None] = reactive(None, recompose=True)

    def __init__(self, props: ViewProps, **kwargs: Any) -> None:
        super().__init__(props, **kwargs)
        self.object: EntityObject | None = None
        self.controller.register_operator(
            "form.values", self._values_operator, category="form"
        )
        self.controller.register_operator(
            "form.submit", self._submit_operator, category="form"
        )

    @property
    def creating(self) -> bool:
        return bool(self.props.behavior.to_creating)

    def _object_input(self) -> dict[str, Any]:
        return {"id": self.props.base_object_id or "", "model_name": self.props.model.name}

    def subscribe_data(self, hooks: DataSourceHooks) -> DataSubscription:
        props = self.props
        if self.creating:
            self.values = props.model.to_supplemented_values({})
        elif not props.base_object_id:
            self.values = {}
        return hooks.find_one(
            self._object_input(),
            enabled=bool(props.base_object_id) and not self.creating,
        )

    def apply_data_state(self, state: SubscriptionState) -> None:
        if state.is_fetching:
            return
        if state.error is not None:
            logger.warning(
                "view_data_failed",
                view_type="form",
                model_name=self.props.model.name,
                error=state.error.message,
            )
        self.object = state.data
        self.values = dict(self.object.values) if self.object else {}

    def _finish_creating(self, obj: EntityObject) -> None:
        """Turn the form into an editor of the object it just created."""
        self.props = replace(
            self.props,
            behavior=self.props.behavior.model_copy(
                update={"to_creating": None, "to_creating_id": None}
            ),
            base_object_id=obj.id,
        )
        if self.subscription is not None:
            self.subscription.set_input(self._object_input())
            self.subscription.set_enabled(True)

    def compose(self) -> ComposeResult:
        if self.values is None:
            yield Static("Loading...", classes="loading")
            return
        yield from self._compose_items(self.props.view.items)
        if self.props.behavior.mode == "edit" and not self.props.behavior.readonly:
            yield Button("Save", id="save", variant="primary")

    def _compose_items(self, items: list[Any]) -> ComposeResult:
        for item in items:
            if isinstance(item, ViewPanel):
                with Vertical(classes="panel"):
                    yield Label(item.title, classes="panel-title")
                    yield from self._compose_items(item.items)
            else:
                yield Horizontal(
                    Label(item.title or item.name, classes="field-label"),
                    self._build_field(item),
                    classes="field-row",
                )

    def _build_field(self, item: ViewField) -> Widget:
        props = self.props
        suite = self.view_options.get("suite")
        widget_name = item.widget or "textfield"
        widget = (
            props.components.get_widget(widget_name, suite)
            if props.components is not None
            else _FALLBACK_SUITE.get_widget(widget_name)
        ) or _FALLBACK_SUITE.get_widget("textfield")
        return widget.build(
            WidgetProps(
                field=item,
                value=(self.values or {}).get(item.name),
                model=props.model,
                view=props.view,
                behavior=props.behavior,
                object=self.object,
                options=item.widget_options or {},
            )
        )

    def collect_values(self) -> dict[str, Any]:
        """Values currently held by the form's input widgets."""
        collected = dict(self.values or {})
        for view_field in self.props.view.iter_fields():
            model_field = self.props.model.find_field_by_name(view_field.name)
            for widget in self.query("*"):
                if widget.name == view_field.name and isinstance(widget, INPUT_WIDGETS):
                    value = read_widget_value(widget, model_field.type if model_field else None)
                    if value is not None or model_field is None or not model_field.is_required:
                        collected[view_field.name] = value
                    break
        return collected

    async def save(self) -> EntityObject | None:
        """Validate and persist the entered values."""
        props = self.props
        if props.data_source is None:
            return None
        values = props.model.validate_values(self.collect_values())
        if self.creating:
            reference = (
                ReferenceSource(
                    from_model_name=props.reference.from_model_name,
                    from_field_name=props.reference.from_field_name,
                    from_object_id=props.reference.from_object_id,
                )
                if props.reference
                else None
            )
            obj = await props.data_source.create(
                props.model.name,
                values,
                id=props.behavior.to_creating_id or props.base_object_id or None,
                reference=reference,
            )
            created = True
        else:
            if not props.base_object_id:
                return None
            await props.data_source.update_values(props.base_object_id, values)
            obj = await props.data_source.find_one(props.base_object_id, props.model.name)
            created = False
        if obj is not None:
            self.object = obj
            if created:
                self._finish_creating(obj)
            logger.info(
                "object_saved", model_name=props.model.name, object_id=obj.id, created=created
            )
            self.post_message(ObjectSaved(obj, created))
        return obj

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "save":
            return
        event.stop()
        try:
            await self.save()
        except MosaicError as e:
            self.notify(e.message, severity="error")

    async def _values_operator(self, _input: Any) -> dict[str, Any]:
        return self.collect_values()

    async def _submit_operator(self, _input: Any) -> EntityObject | None:
        return await self.save()


# =============================================================================
# Collections
# =============================================================================


class _CollectionView(EntityViewWidget):
    """Shared loading for views listing many objects.

    Objects come from a ``find_many`` subscription whose input is the
    view's model and query; :meth:`show_page` changes the query.
    """

    objects: reactive[list[EntityObject] | None] = reactive(None)

    keep_previous_data = False

    def __init__(self, props: ViewProps, **kwargs: Any) -> None:
        super().__init__(props, **kwargs)
        self.page_index = 1
        self.controller.register_operator(
            "collection.refresh", self._refresh_operator, category="collection"
        )
        self.controller.register_operator(
            "collection.objects", self._objects_operator, category="collection"
        )
        self.controller.register_operator(
            "collection.page", self._page_operator, category="collection"
        )

    def query_for(self) -> EntityQuery:
        return EntityQuery(
            page_index=self.page_index,
            page_size=self.view_options.get("pageSize"),
            references=self.props.reference,
        )

    def _query_input(self) -> dict[str, Any]:
        return {"model_name": self.props.model.name, "query": self.query_for()}

    def subscribe_data(self, hooks: DataSourceHooks) -> DataSubscription:
        return hooks.find_many(
            self._query_input(),
            select=lambda result: result.data,
            keep_previous_data=self.keep_previous_data,
        )

    def apply_data_state(self, state: SubscriptionState) -> None:
        if state.error is not None:
            logger.warning(
                "view_data_failed",
                view_type=self.props.view.view_type,
                model_name=self.props.model.name,
                error=state.error.message,
            )
            self.objects = list(state.data or [])
        elif state.data is not None:
            self.objects = state.data

    def show_page(self, page_index: int) -> None:
        """Switch the subscription to another page of objects."""
        self.page_index = page_index
        if self.subscription is not None:
            self.subscription.set_input(self._query_input())

    async def _refresh_operator(self, _input: Any) -> int:
        await self.load()
        return len(self.objects or [])

    async def _objects_operator(self, _input: Any) -> list[EntityObject]:
        return list(self.objects or [])

    async def _page_operator(self, page_index: Any) -> int:
        self.show_page(int(page_index))
        if self.subscription is not None:
            await self.subscription.wait()
        return len(self.objects or [])


class EntityGrid(_CollectionView):
    """Tabular list of objects; selecting a row posts :class:`ObjectSelected`."""

    DEFAULT_CSS = """
    EntityGrid DataTable {
        height: auto;
        max-height: 30;
    }
    """

    keep_previous_data = True

    def compose(self) -> ComposeResult:
        yield DataTable(cursor_type="row", zebra_stripes=True)

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        for view_field in self.props.view.iter_fields():
            table.add_column(view_field.title or view_field.name, key=view_field.name)

    def watch_objects(self, objects: list[EntityObject] | None) -> None:
        if objects is None:
            return
        table = self.query_one(DataTable)
        table.clear()
        fields = self.props.view.iter_fields()
        for obj in objects:
            table.add_row(*(_cell(obj.values.get(f.name)) for f in fields), key=obj.id)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        if event.row_key.value is not None:
            self.post_message(ObjectSelected(self.props.model.name, event.row_key.value))


class EntityKanban(_CollectionView):
    """Objects grouped into columns by the ``groupBy`` view option."""

    DEFAULT_CSS = """
    EntityKanban Horizontal {
        height: auto;
    }

    EntityKanban .kanban-column {
        width: 1fr;
        height: auto;
    }
    """

    def compose(self) -> ComposeResult:
        if self.objects is None:
            yield Static("Loading...", classes="loading")
            return
        group_by = self.view_options.get("groupBy")
        title_field = self.view_options.get("titleField") or next(
            (f.name for f in self.props.view.iter_fields()), "id"
        )
        groups: dict[str, list[EntityObject]] = {
            str(value): [] for value in self._column_values(group_by)
        }
        for obj in self.objects:
            groups.setdefault(_cell(obj.values.get(group_by)), []).append(obj)
        with Horizontal():
            for column, members in groups.items():
                with Vertical(classes="kanban-column"):
                    yield Label(column or "(none)", classes="kanban-title")
                    for obj in members:
                        yield Button(_cell(obj.values.get(title_field)) or obj.id, name=obj.id)

    def _column_values(self, group_by: str | None) -> list[Any]:
        model_field = self.props.model.find_field_by_name(group_by) if group_by else None
        if model_field is None:
            return []
        return [o["value"] if isinstance(o, dict) else o for o in model_field.options]

    def watch_objects(self, objects: list[EntityObject] | None) -> None:
        if objects is not None:
            self.refresh(recompose=True)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.name:
            event.stop()
            self.post_message(ObjectSelected(self.props.model.name, event.button.name))


class EntityDashboard(_CollectionView):
    """Object count plus a value breakdown for every field in the view."""

    def compose(self) -> ComposeResult:
        if self.objects is None:
            yield Static("Loading...", classes="loading")
            return
        yield Label(f"{self.props.view.title}: {len(self.objects)} objects", classes="dashboard-total")
        for view_field in self.props.view.iter_fields():
            counts = Counter(_cell(obj.values.get(view_field.name)) for obj in self.objects)
            summary = ", ".join(f"{value or '(none)'}: {n}" for value, n in counts.most_common(5))
            yield Static(f"{view_field.title or view_field.name}  {summary}", classes="dashboard-stat")

    def watch_objects(self, objects: list[EntityObject] | None) -> None:
        if objects is not None:
            self.refresh(recompose=True)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(map(str, value))
    return str(value)


# =============================================================================
# Composite views
# =============================================================================


class EntityMasterTail(EntityViewWidget):
    """Grid on the left, detail container on the right.

    Selecting a row performs a view action on the detail container for
    the ``tailViewType`` view (``form`` by default) of the selected object.
    The detail container shares the enclosing routing scope when the view
    was resolved without a scope of its own.
    """

    DEFAULT_CSS = """
    EntityMasterTail {
        layout: horizontal;
        height: auto;
    }

    EntityMasterTail > EntityGrid {
        width: 2fr;
    }

    EntityMasterTail > ViewContainer {
        width: 3fr;
    }
    """

    def compose(self) -> ComposeResult:
        from mosaic.tui.container import ViewContainer

        yield EntityGrid(self.props)
        yield ViewContainer(
            name=self.view_options.get("tailName"),
            model_name=self.props.model.name,
            share_scope=not self.props.opens_scope,
        )

    def on_object_selected(self, event: ObjectSelected) -> None:
        from mosaic.routing.types import Action, ContextObject
        from mosaic.tui.container import ViewContainer

        event.stop()
        tail = self.query_one(ViewContainer)
        tail.perform_action(
            Action(
                action_type="view",
                payload={
                    "modelName": event.model_name,
                    "viewType": self.view_options.get("tailViewType", "form"),
                    "viewName": self.view_options.get("tailViewName"),
                },
                context_object=ContextObject(id=event.object_id, model_name=event.model_name),
                target=tail.scope.name,
            )
        )


class EntityShell(EntityViewWidget):
    """Titled frame hosting one container seeded with ``defaultAction``."""

    def compose(self) -> ComposeResult:
        from mosaic.routing.types import Action
        from mosaic.tui.container import ViewContainer

        raw = self.view_options.get("defaultAction")
        yield Label(self.props.view.title, classes="shell-title")
        with VerticalScroll():
            yield ViewContainer(
                initial_action=Action.model_validate(raw) if raw else None,
                model_name=self.props.model.name,
                share_scope=not self.props.opens_scope,
            )


# =============================================================================
# Component table
# =============================================================================


@dataclass(frozen=True, slots=True)
class BuiltinView:
    """A :class:`ViewComponent` instantiating a widget class per render."""

    info: ComponentInfo
    widget_class: type[Widget]

    def build(self, props: ViewProps) -> Widget:
        return self.widget_class(props)


BUILTIN_VIEW_COMPONENTS: tuple[BuiltinView, ...] = (
    BuiltinView(ComponentInfo("form", "Form"), EntityForm),
    BuiltinView(ComponentInfo("grid", "Grid"), EntityGrid),
    BuiltinView(ComponentInfo("mastail", "Master / Detail"), EntityMasterTail),
    BuiltinView(ComponentInfo("shell", "Shell"), EntityShell),
    BuiltinView(ComponentInfo("kanban", "Kanban"), EntityKanban),
    BuiltinView(ComponentInfo("dashboard", "Dashboard"), EntityDashboard),
)

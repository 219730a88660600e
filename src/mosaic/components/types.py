"""Component contracts: view components, widgets, suites, renderers, controllers.

Variants are resolved by name through :class:`ComponentRegistry`; these
protocols only describe the capabilities a registered component offers.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

from textual.widget import Widget

from mosaic.meta.delegates import ModelDelegate, ViewDelegate
from mosaic.meta.types import CamelModel, EntityObject, ViewField

if TYPE_CHECKING:
    from mosaic.datasource.base import DataSource
    from mosaic.datasource.query import ReferenceScope

__all__ = [
    "CapabilityDescriptor",
    "ComponentInfo",
    "EntityWidget",
    "NamedRenderer",
    "OperatorDescriptor",
    "SuiteAdapter",
    "ViewBehavior",
    "ViewComponent",
    "ViewController",
    "ViewProps",
    "WidgetProps",
]


class ViewBehavior(CamelModel):
    """How a view should behave for the object it shows.

    Attributes:
        mode: ``display`` or ``edit``.
        to_creating: The view creates a new object instead of editing one.
        to_creating_id: Identifier reserved for the object being created.
    """

    mode: Literal["display", "edit"] = "display"
    readonly: bool = False
    disable_edit: bool = False
    disable_delete: bool = False
    disable_new: bool = False
    to_creating: bool | None = None
    to_creating_id: str | None = None


@dataclass(frozen=True, slots=True)
class ComponentInfo:
    """Display metadata of a view component or widget."""

    name: str
    display_name: str
    description: str = ""
    icon: str | None = None


@dataclass(slots=True)
class ViewProps:
    """Everything a view component needs to build its widget tree.

    ``opens_scope`` is false when containers nested in the view should share
    the enclosing container's routing scope instead of opening a child.
    """

    model: ModelDelegate
    view: ViewDelegate
    behavior: ViewBehavior = field(default_factory=ViewBehavior)
    base_object_id: str | None = None
    reference: ReferenceScope | None = None
    data_source: DataSource | None = None
    components: Any = None
    opens_scope: bool = True


@dataclass(slots=True)
class WidgetProps:
    """Everything a field widget needs to render one field."""

    field: ViewField
    value: Any
    model: ModelDelegate
    view: ViewDelegate
    behavior: ViewBehavior = field(default_factory=ViewBehavior)
    object: EntityObject | None = None
    options: Mapping[str, Any] = field(default_factory=dict)


@runtime_checkable
class ViewComponent(Protocol):
    """Builds the widget tree for one view type (form, grid, ...)."""

    info: ComponentInfo

    def build(self, props: ViewProps) -> Widget: ...


@runtime_checkable
class EntityWidget(Protocol):
    """Renders one field of a view."""

    info: ComponentInfo

    def build(self, props: WidgetProps) -> Widget: ...


@runtime_checkable
class SuiteAdapter(Protocol):
    """A named, versioned set of widgets."""

    suite_name: str
    suite_version: str

    def get_widget(self, widget_name: str) -> EntityWidget | None: ...

    def get_widgets(self) -> list[EntityWidget]: ...


@dataclass(frozen=True, slots=True)
class NamedRenderer:
    """A custom component addressable by name, optionally bound to a slot."""

    name: str
    renderer: Callable[..., Widget]
    slot_name: str | None = None
    disabled: bool = False


class OperatorDescriptor(CamelModel):
    name: str
    category: str | None = None
    description: str | None = None
    flags: list[str] = []


class CapabilityDescriptor(CamelModel):
    """Operators a view controller can invoke."""

    operators: list[OperatorDescriptor] = []

    def names(self) -> list[str]:
        return [op.name for op in self.operators]


@runtime_checkable
class ViewController(Protocol):
    """Programmatic handle on a mounted view."""

    model_name: str
    view_type: str
    view_id: str

    def describe(self) -> CapabilityDescriptor: ...

    async def invoke(self, operator: str, input: Any = None) -> Any: ...


OperatorHandler = Callable[[Any], Awaitable[Any]]

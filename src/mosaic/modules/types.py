"""Module contract and the contribution containers each boot phase fills."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import Field

from mosaic.components.types import EntityWidget, NamedRenderer, SuiteAdapter, ViewComponent
from mosaic.events.types import EventListener
from mosaic.meta.types import CamelModel, EntityModel, EntityView

if TYPE_CHECKING:
    from mosaic.actions.types import ActionHandler, RequestHandler
    from mosaic.servlets.types import Servlet

__all__ = [
    "ComponentContributions",
    "ConfigContributions",
    "DataContributions",
    "EventHandlerBinding",
    "ImportEntity",
    "ImportReference",
    "Module",
    "ModuleInfo",
]


class ModuleInfo(CamelModel):
    """Identity of a module; ``name`` must be unique across an engine."""

    name: str
    version: str = "0.0.0"
    provider: str | None = None
    description: str | None = None
    dependencies: list[str] = Field(default_factory=list)


@dataclass(slots=True)
class EventHandlerBinding:
    """A listener bound to every event name in ``names``."""

    names: list[str]
    listener: EventListener


@dataclass(slots=True)
class ConfigContributions:
    models: list[EntityModel] = field(default_factory=list)
    views: list[EntityView] = field(default_factory=list)
    event_handlers: list[EventHandlerBinding] = field(default_factory=list)
    action_handlers: list[ActionHandler] = field(default_factory=list)
    request_handlers: list[RequestHandler] = field(default_factory=list)
    servlets: list[Servlet] = field(default_factory=list)


@dataclass(slots=True)
class ComponentContributions:
    views: list[ViewComponent] = field(default_factory=list)
    widgets: list[EntityWidget] = field(default_factory=list)
    adapters: list[SuiteAdapter] = field(default_factory=list)
    renderers: list[NamedRenderer] = field(default_factory=list)


class ImportReference(CamelModel):
    """Link from the owning seed entity's ``from_field_name`` to another seed entity."""

    from_field_name: str
    to_object_id: str


class ImportEntity(CamelModel):
    """Seed object: ``{id, modelName, values, references?}``."""

    id: str
    model_name: str
    values: dict[str, Any] = Field(default_factory=dict)
    references: list[ImportReference] = Field(default_factory=list)


@dataclass(slots=True)
class DataContributions:
    entities: list[ImportEntity] = field(default_factory=list)


class Module:
    """Base class for engine modules.

    Subclasses set :attr:`info` and override the phases they contribute
    to. Every phase is optional.

    Example:
        ```python
        class CrmModule(Module):
            info = ModuleInfo(name="crm", version="1.0.0")

            async def setup_config(self, config: ConfigContributions) -> None:
                config.models.append(customer_model)
                config.views.append(customer_grid)
        ```
    """

    info: ModuleInfo

    async def setup_config(self, config: ConfigContributions) -> None:
        """Contribute models, views, listeners, handlers and servlets."""

    async def setup_components(self, components: ComponentContributions) -> None:
        """Contribute view components, widgets, suites and renderers (presentation tier)."""

    async def setup_data(self, data: DataContributions) -> None:
        """Contribute seed objects (service tier)."""

    def __repr__(self) -> str:
        info = getattr(self, "info", None)
        return f"{type(self).__name__}({info.name if info else '?'})"

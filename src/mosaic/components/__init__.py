"""View components, widget suites, named renderers and view controllers."""

from __future__ import annotations

from mosaic.components.controllers import BaseViewController
from mosaic.components.registry import ComponentRegistry
from mosaic.components.types import (
    CapabilityDescriptor,
    ComponentInfo,
    EntityWidget,
    NamedRenderer,
    OperatorDescriptor,
    SuiteAdapter,
    ViewBehavior,
    ViewComponent,
    ViewController,
    ViewProps,
    WidgetProps,
)

__all__ = [
    "BaseViewController",
    "CapabilityDescriptor",
    "ComponentInfo",
    "ComponentRegistry",
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

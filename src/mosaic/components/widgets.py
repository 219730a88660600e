"""Built-in field widget suite (``build-in``).

Each widget turns one view field into a textual widget. In ``edit`` mode
editable fields become inputs carrying the field name as their ``name``;
otherwise the value is rendered read-only.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from textual.widget import Widget
from textual.widgets import Checkbox, Input, Markdown, Select, Static, Switch, TextArea

from mosaic.components.types import ComponentInfo, EntityWidget, WidgetProps
from mosaic.constants import BUILTIN_SUITE_NAME, BUILTIN_SUITE_VERSION
from mosaic.meta.fieldtypes import normalize_option

__all__ = [
    "BUILTIN_WIDGETS",
    "INPUT_WIDGETS",
    "BuiltinSuiteAdapter",
    "FieldWidget",
    "WidgetSuite",
    "is_editable",
    "read_widget_value",
]

WidgetBuilder = Callable[[WidgetProps], Widget]


@dataclass(frozen=True, slots=True)
class FieldWidget:
    """An :class:`EntityWidget` backed by a builder function."""

    info: ComponentInfo
    builder: WidgetBuilder

    def build(self, props: WidgetProps) -> Widget:
        return self.builder(props)


def is_editable(props: WidgetProps) -> bool:
    """Whether ``props`` describe an editable field in edit mode."""
    if props.behavior.mode != "edit" or props.behavior.readonly:
        return False
    model_field = props.model.find_field_by_name(props.field.name)
    return model_field is None or model_field.editable


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def _display(props: WidgetProps) -> Widget:
    return Static(_text(props.value), name=props.field.name, classes="field-value")


def _textfield(props: WidgetProps) -> Widget:
    if not is_editable(props):
        return _display(props)
    return Input(
        value=_text(props.value),
        placeholder=props.options.get("placeholder", props.field.title or ""),
        name=props.field.name,
    )


def _password(props: WidgetProps) -> Widget:
    if not is_editable(props):
        return Static("••••••" if props.value else "", name=props.field.name)
    return Input(value=_text(props.value), password=True, name=props.field.name)


def _number(props: WidgetProps) -> Widget:
    if not is_editable(props):
        return _display(props)
    return Input(value=_text(props.value), type="number", name=props.field.name)


def _switch(props: WidgetProps) -> Widget:
    if not is_editable(props):
        return _display(props)
    return Switch(value=bool(props.value), name=props.field.name)


def _checkbox(props: WidgetProps) -> Widget:
    if not is_editable(props):
        return _display(props)
    return Checkbox(props.field.title or props.field.name, bool(props.value), name=props.field.name)


def _select(props: WidgetProps) -> Widget:
    model_field = props.model.find_field_by_name(props.field.name)
    options = [o for o in map(normalize_option, model_field.options if model_field else []) if o]
    if not is_editable(props):
        labels = {str(o.value): o.label for o in options}
        values = props.value if isinstance(props.value, list) else [props.value]
        return Static(
            ", ".join(labels.get(str(v), _text(v)) for v in values if v not in (None, "")),
            name=props.field.name,
        )
    choices = [(o.label, str(o.value)) for o in options]
    current = str(props.value) if props.value not in (None, "") else None
    return Select(
        choices,
        value=current if current in {v for _, v in choices} else Select.BLANK,
        allow_blank=True,
        name=props.field.name,
    )


def _reference(props: WidgetProps) -> Widget:
    ids = props.value if isinstance(props.value, list) else []
    label = f"{len(ids)} linked" if ids else "none linked"
    return Static(label, name=props.field.name, classes="field-reference")


def _json(props: WidgetProps) -> Widget:
    text = json.dumps(props.value, indent=2, default=str) if props.value is not None else ""
    if not is_editable(props):
        return Static(text, name=props.field.name)
    return TextArea(text, name=props.field.name)


def _file(props: WidgetProps) -> Widget:
    value = props.value if isinstance(props.value, dict) else {}
    return Static(value.get("name") or "no file", name=props.field.name)


def _markdown(props: WidgetProps) -> Widget:
    if is_editable(props):
        return TextArea(_text(props.value), name=props.field.name)
    return Markdown(_text(props.value), name=props.field.name)


def _identifier(props: WidgetProps) -> Widget:
    object_id = props.object.id if props.object else props.value
    return Static(_text(object_id), name=props.field.name, classes="field-id")


def _nothing(props: WidgetProps) -> Widget:
    return Static("", name=props.field.name)


def _widget(name: str, display_name: str, builder: WidgetBuilder) -> FieldWidget:
    return FieldWidget(ComponentInfo(name=name, display_name=display_name), builder)


BUILTIN_WIDGETS: tuple[FieldWidget, ...] = (
    _widget("textfield", "Text Field", _textfield),
    _widget("password", "Password", _password),
    _widget("number", "Number", _number),
    _widget("switch", "Switch", _switch),
    _widget("checkbox", "Checkbox", _checkbox),
    _widget("date", "Date", _textfield),
    _widget("select", "Select", _select),
    _widget("reference", "Reference", _reference),
    _widget("json", "JSON", _json),
    _widget("file", "File", _file),
    _widget("markdown", "Markdown", _markdown),
    _widget("id", "Identifier", _identifier),
    _widget("none", "None", _nothing),
)


class WidgetSuite:
    """Suite adapter over a fixed collection of widgets."""

    def __init__(
        self, suite_name: str, suite_version: str, widgets: Iterable[EntityWidget]
    ) -> None:
        self.suite_name = suite_name
        self.suite_version = suite_version
        self._widgets = {w.info.name: w for w in widgets}

    def get_widget(self, widget_name: str) -> EntityWidget | None:
        return self._widgets.get(widget_name)

    def get_widgets(self) -> list[EntityWidget]:
        return list(self._widgets.values())


class BuiltinSuiteAdapter(WidgetSuite):
    """The ``build-in`` suite every component registry falls back to."""

    def __init__(self) -> None:
        super().__init__(BUILTIN_SUITE_NAME, BUILTIN_SUITE_VERSION, BUILTIN_WIDGETS)


INPUT_WIDGETS = (Input, Switch, Checkbox, Select, TextArea)


def read_widget_value(widget: Widget, field_type: str | None) -> Any:
    """Read the current value out of an input widget built by this suite."""
    if isinstance(widget, (Switch, Checkbox)):
        return widget.value
    if isinstance(widget, Select):
        return None if widget.value is Select.BLANK else widget.value
    if isinstance(widget, TextArea):
        if field_type == "json":
            return json.loads(widget.text) if widget.text.strip() else None
        return widget.text
    if isinstance(widget, Input):
        if field_type == "number":
            if not widget.value.strip():
                return None
            number = float(widget.value)
            return int(number) if number.is_integer() else number
        return widget.value
    return None

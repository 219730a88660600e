"""Table-driven view controller base class."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mosaic.components.types import CapabilityDescriptor, OperatorDescriptor, OperatorHandler
from mosaic.exceptions import UnknownOperatorError

__all__ = ["BaseViewController"]


@dataclass(frozen=True, slots=True)
class _Operator:
    handler: OperatorHandler
    descriptor: OperatorDescriptor


class BaseViewController:
    """View controller dispatching ``invoke`` through named operators.

    Example:
        ```python
        controller = BaseViewController("customer", "grid", "grid-1")
        controller.register_operator(
            "collection.refresh", refresh, category="collection"
        )
        await controller.invoke("collection.refresh")
        ```
    """

    def __init__(self, model_name: str, view_type: str, view_id: str) -> None:
        self.model_name = model_name
        self.view_type = view_type
        self.view_id = view_id
        self._operators: dict[str, _Operator] = {}

    def register_operator(
        self,
        name: str,
        handler: OperatorHandler,
        *,
        category: str | None = None,
        description: str | None = None,
        flags: list[str] | None = None,
    ) -> None:
        self._operators[name] = _Operator(
            handler,
            OperatorDescriptor(
                name=name, category=category, description=description, flags=flags or []
            ),
        )

    def describe(self) -> CapabilityDescriptor:
        return CapabilityDescriptor(
            operators=[op.descriptor for op in self._operators.values()]
        )

    async def invoke(self, operator: str, input: Any = None) -> Any:
        """Run ``operator`` with ``input``.

        Raises:
            UnknownOperatorError: If no operator of that name is registered.
        """
        entry = self._operators.get(operator)
        if entry is None:
            raise UnknownOperatorError(operator, list(self._operators))
        return await entry.handler(input)

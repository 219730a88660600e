"""Routing scopes of nested master-detail containers."""

from __future__ import annotations

import itertools
import secrets
from collections.abc import Callable
from typing import Any

from mosaic.constants import ROOT_CONTAINER_NAME, TARGET_PARENT, TARGET_ROOT, TARGET_SELF
from mosaic.logging import get_logger
from mosaic.routing.types import Action, BroadcastData, BroadcastKind, ContextObject

__all__ = ["ContainerScope"]

logger = get_logger(__name__)

_container_index = itertools.count()

ActionListener = Callable[[Action], None]
BroadcastListener = Callable[[BroadcastData], None]


def _generate_name() -> str:
    return f"ec-{next(_container_index)}-{secrets.token_hex(4)[:7]}"


class ContainerScope:
    """Action-routing scope of one container.

    Scopes form a tree mirroring nested containers. ``perform_action``
    routes an action to the scope it targets; the receiving scope records
    it as ``current_action`` and notifies its action listeners.

    Routing by ``target``:

    - ``__self__`` or this scope's name: handled here.
    - ``__root__``: bubbled up to the root.
    - ``__parent__``: handed to the parent (handled here at the root).
    - another name: forwarded to the child of that name, else bubbled to
      the parent, else handled here.
    - no target: forwarded to the only child if there is exactly one,
      else handled here.

    Actions forwarded down to a child are retargeted to ``__self__``.

    Example:
        ```python
        root = ContainerScope()
        detail = root.child("detail")
        detail.on_action(lambda action: print(action.payload))
        root.perform_action(Action(action_type="view", payload={...}, target="detail"))
        ```
    """

    def __init__(
        self,
        parent: ContainerScope | None = None,
        name: str | None = None,
        parent_context: ContextObject | None = None,
        model_name: str | None = None,
    ) -> None:
        self.parent = parent
        if parent is None:
            self.name = ROOT_CONTAINER_NAME
        else:
            self.name = name or _generate_name()
        self.parent_context = parent_context
        self.model_name = model_name
        self.current_action: Action | None = None
        self.broadcast_data: BroadcastData | None = None
        self._children: dict[str, ContainerScope] = {}
        self._action_listeners: list[ActionListener] = []
        self._broadcast_listeners: list[BroadcastListener] = []

    def __repr__(self) -> str:
        return f"ContainerScope({self.name!r})"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def root(self) -> ContainerScope:
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    @property
    def children(self) -> dict[str, ContainerScope]:
        return dict(self._children)

    @property
    def container_model_name(self) -> str | None:
        """Model this container shows: its own, else the parent context's."""
        if self.model_name:
            return self.model_name
        return self.parent_context.model_name if self.parent_context else None

    # -------------------------------------------------------------------------
    # Tree
    # -------------------------------------------------------------------------

    def register_container(self, child: ContainerScope) -> None:
        self._children[child.name] = child

    def unregister_container(self, name: str) -> None:
        self._children.pop(name, None)

    def child(
        self,
        name: str | None = None,
        parent_context: ContextObject | None = None,
        model_name: str | None = None,
    ) -> ContainerScope:
        """Create and register a nested scope.

        ``parent_context`` defaults to the context object of this scope's
        current action.
        """
        if parent_context is None and self.current_action is not None:
            parent_context = self.current_action.context_object
        scope = ContainerScope(
            parent=self, name=name, parent_context=parent_context, model_name=model_name
        )
        self.register_container(scope)
        return scope

    def close(self) -> None:
        """Detach from the parent and drop every listener."""
        if self.parent is not None:
            self.parent.unregister_container(self.name)
        self._action_listeners.clear()
        self._broadcast_listeners.clear()

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def on_action(self, listener: ActionListener) -> Callable[[], None]:
        self._action_listeners.append(listener)
        return lambda: self._discard(self._action_listeners, listener)

    def on_broadcast(self, listener: BroadcastListener) -> Callable[[], None]:
        self._broadcast_listeners.append(listener)
        return lambda: self._discard(self._broadcast_listeners, listener)

    @staticmethod
    def _discard(listeners: list[Any], listener: Any) -> None:
        if listener in listeners:
            listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def _accept(self, action: Action) -> None:
        self.current_action = action
        logger.debug(
            "container_action_accepted",
            container=self.name,
            action_type=action.action_type,
        )
        for listener in list(self._action_listeners):
            listener(action)

    def perform_action(self, action: Action) -> None:
        target = action.target

        if target == TARGET_SELF or target == self.name:
            self._accept(action)
            return

        if target == TARGET_ROOT:
            if self.parent is not None:
                self.parent.perform_action(action)
            else:
                self._accept(action)
            return

        if target == TARGET_PARENT:
            if self.parent is not None:
                self.parent.perform_action(action.retargeted_to_self())
            else:
                self._accept(action)
            return

        if target:
            child = self._children.get(target)
            if child is not None:
                child.perform_action(action.retargeted_to_self())
            elif self.parent is not None:
                self.parent.perform_action(action)
            else:
                self._accept(action)
            return

        if len(self._children) == 1:
            (only,) = self._children.values()
            only.perform_action(action.retargeted_to_self())
            return
        self._accept(action)

    def broadcast(self, kind: BroadcastKind, payload: Any = None) -> BroadcastData:
        """Record ``kind`` on this scope and every ancestor.

        Never changes any scope's ``current_action``.
        """
        data = BroadcastData(kind=kind, payload=payload)
        scope: ContainerScope | None = self
        while scope is not None:
            scope.broadcast_data = data
            for listener in list(scope._broadcast_listeners):
                listener(data)
            scope = scope.parent
        return data

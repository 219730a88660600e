"""Registry of action handlers and request handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mosaic.actions.types import ActionHandler, ActionResult, EntityAction, RequestHandler
from mosaic.logging import get_logger

if TYPE_CHECKING:
    from mosaic.engine.engine import Engine

__all__ = ["ActionRegistry"]

logger = get_logger(__name__)


class ActionRegistry:
    """Action handlers keyed by action name; request handlers by path prefix.

    A handler declaring several action names is registered under each of
    them; the last registration for a name wins.
    """

    def __init__(self) -> None:
        self._action_handlers: dict[str, ActionHandler] = {}
        self._request_handlers: dict[str, RequestHandler] = {}

    def register_action_handler(self, handler: ActionHandler) -> None:
        for name in handler.action_names:
            self._action_handlers[name] = handler

    def get_action_handler(self, name: str) -> ActionHandler | None:
        return self._action_handlers.get(name)

    def register_request_handler(self, handler: RequestHandler) -> None:
        self._request_handlers[handler.path_start_with] = handler

    def get_request_handler(self, path: str) -> RequestHandler | None:
        return self._request_handlers.get(path)

    def list_action_names(self) -> list[str]:
        return sorted(self._action_handlers)

    async def dispatch(self, action: EntityAction, engine: Engine) -> ActionResult:
        """Run the handler registered for ``action.name``.

        Handler failures are reported as a failed result, never raised.
        """
        handler = self.get_action_handler(action.name)
        if handler is None:
            logger.warning("action_handler_not_found", action=action.name)
            return ActionResult.failure("Action handler not found")
        try:
            return await handler.handle(action, engine)
        except Exception as e:
            logger.exception("action_handler_failed", action=action.name)
            return ActionResult.failure(str(e) or type(e).__name__)

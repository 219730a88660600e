"""Registry of servlets keyed by mount path."""

from __future__ import annotations

from mosaic.constants import HttpMethod
from mosaic.logging import get_logger
from mosaic.servlets.types import Servlet

__all__ = ["ServletRegistry"]

logger = get_logger(__name__)


class ServletRegistry:
    """Servlets keyed by path; lookup also checks the allowed methods."""

    def __init__(self) -> None:
        self._servlets: dict[str, Servlet] = {}

    def register(self, servlet: Servlet) -> None:
        if servlet.path in self._servlets:
            logger.debug("servlet_replaced", path=servlet.path)
        self._servlets[servlet.path] = servlet

    def unregister(self, path: str) -> None:
        self._servlets.pop(path, None)

    def get(self, path: str, method: HttpMethod) -> Servlet | None:
        """Return the servlet at ``path`` if it accepts ``method``."""
        servlet = self._servlets.get(path)
        if servlet is not None and method in servlet.methods:
            return servlet
        return None

    def list_paths(self) -> list[str]:
        return sorted(self._servlets)

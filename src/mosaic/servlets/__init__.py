"""Request servlets mounted under the engine endpoint."""

from __future__ import annotations

from mosaic.servlets.registry import ServletRegistry
from mosaic.servlets.types import HttpResponse, Servlet, ServletRequest, ServletResponse

__all__ = [
    "HttpResponse",
    "Servlet",
    "ServletRegistry",
    "ServletRequest",
    "ServletResponse",
]

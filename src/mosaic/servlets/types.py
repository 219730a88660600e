"""Servlet contract: path-keyed request handlers with allowed methods."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from mosaic.constants import HttpMethod

if TYPE_CHECKING:
    from mosaic.engine.engine import Engine

__all__ = ["HttpResponse", "Servlet", "ServletRequest", "ServletResponse"]


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Transport-neutral response produced by servlets and the engine."""

    status: int = 200
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ServletRequest:
    """Request handed to a servlet.

    Attributes:
        method: HTTP method of the request.
        path: Remainder of the path after the servlet's own segment
            (always starts with ``/``).
        engine: Engine instance serving the request.
        body: Decoded request body, if any.
        query: Query string parameters.
    """

    method: HttpMethod
    path: str
    engine: Engine
    body: Any = None
    query: Mapping[str, str] = field(default_factory=dict)


class ServletResponse:
    """Write-once holder a servlet fills in."""

    __slots__ = ("_response",)

    def __init__(self) -> None:
        self._response: HttpResponse | None = None

    def write(self, response: HttpResponse) -> None:
        self._response = response

    def read(self) -> HttpResponse | None:
        return self._response


@runtime_checkable
class Servlet(Protocol):
    """Handler mounted under ``<endpoint>/servlet<path>``."""

    path: str
    methods: tuple[HttpMethod, ...] | list[HttpMethod]

    async def handle(self, request: ServletRequest, response: ServletResponse) -> None: ...

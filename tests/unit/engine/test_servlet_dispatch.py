"""Tests for request dispatch to servlets under the engine endpoint."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mosaic.engine import Engine, EngineSettings, boot_engine
from mosaic.engine import engine as engine_module
from mosaic.servlets import HttpResponse, ServletRequest, ServletResponse
from tests.unit.engine.support import ModuleInitializer


class EchoServlet:
    path = "/echo"
    methods = ("POST",)

    def __init__(self) -> None:
        self.requests: list[ServletRequest] = []

    async def handle(self, request: ServletRequest, response: ServletResponse) -> None:
        self.requests.append(request)
        response.write(HttpResponse(status=201, body=request.body))


class BrokenServlet:
    path = "/broken"
    methods = ("GET",)

    async def handle(self, request: ServletRequest, response: ServletResponse) -> None:
        raise RuntimeError("kaput")


class SilentServlet:
    path = "/silent"
    methods = ("GET",)

    async def handle(self, request: ServletRequest, response: ServletResponse) -> None:
        return None


@pytest.fixture
async def engine() -> Engine:
    engine = Engine(EngineSettings(tier="service", endpoint="/api/ee"))
    await boot_engine(engine, ModuleInitializer())
    return engine


class TestHandleRequest:
    async def test_greeting_servlet(self, engine: Engine) -> None:
        response = await engine.handle_request("GET", "/api/ee/servlet/hello")

        assert response.status == 200
        assert response.body == "Hello from the built-in module! /api/ee"

    async def test_greeting_accepts_post(self, engine: Engine) -> None:
        response = await engine.handle_request("POST", "/api/ee/servlet/hello/world")

        assert response.status == 200

    async def test_method_not_allowed_is_not_found(self, engine: Engine) -> None:
        response = await engine.handle_request("DELETE", "/api/ee/servlet/hello")

        assert response.status == 404

    @pytest.mark.parametrize(
        "path",
        ["/api/ee/servlet/nope", "/api/ee/servlet", "/api/ee/servlet/", "/other/servlet/hello", "/api/ee/servlets/hello"],
    )
    async def test_unknown_routes(self, engine: Engine, path: str) -> None:
        response = await engine.handle_request("GET", path)

        assert response.status == 404

    async def test_request_carries_rest_and_body(self, engine: Engine) -> None:
        echo = EchoServlet()
        engine.servlets.register(echo)

        response = await engine.handle_request(
            "POST", "/api/ee/servlet/echo/a/b", body={"x": 1}, query={"q": "1"}
        )

        assert response.status == 201
        assert response.body == {"x": 1}
        request = echo.requests[0]
        assert request.path == "/a/b"
        assert request.query == {"q": "1"}
        assert request.engine is engine

    async def test_failing_servlet_is_500(
        self, engine: Engine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_logger = MagicMock()
        monkeypatch.setattr(engine_module, "logger", mock_logger)
        engine.servlets.register(BrokenServlet())

        response = await engine.handle_request("GET", "/api/ee/servlet/broken")

        assert response.status == 500
        mock_logger.exception.assert_called_once()
        assert mock_logger.exception.call_args.args[0] == "servlet_failed"

    async def test_silent_servlet_is_500(self, engine: Engine) -> None:
        engine.servlets.register(SilentServlet())

        response = await engine.handle_request("GET", "/api/ee/servlet/silent")

        assert response.status == 500


class TestEngineSettings:
    @pytest.mark.parametrize(
        ("endpoint", "prefix"),
        [("/api/ee", "/api/ee/servlet"), ("api/ee/", "/api/ee/servlet"), ("/", "/servlet")],
    )
    def test_servlet_prefix(self, endpoint: str, prefix: str) -> None:
        assert EngineSettings(endpoint=endpoint).servlet_prefix == prefix

    def test_get_url(self) -> None:
        settings = EngineSettings(base_url="http://localhost:3000/", endpoint="/api/ee")

        assert settings.get_url("/servlet/hello") == "http://localhost:3000/api/ee/servlet/hello"

    def test_tier_flags(self) -> None:
        assert EngineSettings(tier="service").is_service
        assert EngineSettings().is_presentation

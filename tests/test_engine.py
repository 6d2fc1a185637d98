"""Tests for notelink.server.engine — AsgiEngine lifecycle and serving."""

import socket

import pytest

from notelink import ApiConfig, ApiNote, StartupError
from notelink.server import engine as engine_module
from notelink.server.engine import AsgiEngine


def _api(**overrides) -> ApiNote:
    return ApiNote(ApiConfig(title="T", description="", version="1", **overrides))


class TestAsgiEngine:
    def test_register_after_freeze(self) -> None:
        engine = AsgiEngine()
        engine.register_route("GET", "/", lambda ctx: None)
        engine.freeze()
        assert engine.frozen
        with pytest.raises(RuntimeError):
            engine.register_route("GET", "/late", lambda ctx: None)

    def test_freeze_is_idempotent(self) -> None:
        engine = AsgiEngine()
        engine.freeze()
        engine.freeze()
        assert engine.frozen

    def test_routes_drop_replaced(self) -> None:
        engine = AsgiEngine()
        engine.register_route("GET", "/x", lambda ctx: 1)
        engine.register_route("GET", "/x", lambda ctx: 2)
        engine.freeze()
        assert len(engine.routes) == 1

    async def test_lifespan(self) -> None:
        engine = AsgiEngine()
        incoming = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[dict] = []

        async def receive() -> dict:
            return next(incoming)

        async def send(message: dict) -> None:
            sent.append(message)

        await engine({"type": "lifespan"}, receive, send)
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        assert engine.frozen


class TestStart:
    def test_start_serves_resolved_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        served: list[tuple] = []
        ready: list[tuple[str, int]] = []
        monkeypatch.setattr(engine_module, "probe_bind", lambda host, port: None)
        monkeypatch.setattr(
            engine_module,
            "run_server",
            lambda app, host, port, **kw: served.append((host, port, kw)),
        )

        api = _api(host="localhost:3000", workers=2)
        port = api.start(9000, on_ready=lambda host, port: ready.append((host, port)))

        assert port == 3000
        assert ready == [("127.0.0.1", 3000)]
        assert served == [("127.0.0.1", 3000, {"workers": 2, "log_level": "info"})]
        with pytest.raises(RuntimeError):
            api.documented_route(method="GET", path="/late", handler=lambda ctx: None)

    def test_port_in_use(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            engine_module, "run_server", lambda *a, **kw: pytest.fail("must not serve")
        )
        with socket.create_server(("127.0.0.1", 0)) as taken:
            port = taken.getsockname()[1]
            ready: list = []
            with pytest.raises(StartupError, match=str(port)):
                _api().start(port, on_ready=lambda *args: ready.append(args))
        assert ready == []

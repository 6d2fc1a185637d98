"""Tests for bearer-token enforcement on documented routes."""

import time

import pytest

from notelink import ApiConfig, ApiNote, JWTSigner
from notelink.security.audit import SecurityEvent, set_security_event_sink
from notelink.testing import TestClient


def _config(**overrides) -> ApiConfig:
    return ApiConfig(title="Auth API", description="Auth", version="1.0.0", **overrides)


class Spy:
    def __init__(self) -> None:
        self.calls: list = []

    def __call__(self, ctx):
        self.calls.append(ctx.user)
        return {"user": ctx.user}


class RaisingProvider:
    def sign(self, payload):
        return "token"

    def verify(self, token):
        raise RuntimeError("provider down")


@pytest.fixture
def events():
    captured: list[SecurityEvent] = []
    set_security_event_sink(captured.append)
    yield captured
    set_security_event_sink(None)


def _secured_api(provider=None, **config) -> tuple[ApiNote, Spy]:
    spy = Spy()
    api = ApiNote(_config(**config), jwt=provider)
    api.documented_route(method="GET", path="/me", handler=spy, requires_auth=True)
    return api, spy


class TestJWTSigner:
    def test_sign_and_verify(self) -> None:
        signer = JWTSigner("s3cret")
        assert signer.verify(signer.sign({"id": 1})) == {"id": 1}

    def test_wrong_secret(self) -> None:
        token = JWTSigner("one").sign({"id": 1})
        assert JWTSigner("two").verify(token) is None

    def test_garbage(self) -> None:
        assert JWTSigner("s3cret").verify("not-a-token") is None

    def test_expiry_claim(self) -> None:
        signer = JWTSigner("s3cret", expires_in=60)
        payload = signer.verify(signer.sign({"id": 1}))
        assert payload is not None
        assert payload["exp"] > time.time()

    def test_expired_token(self) -> None:
        signer = JWTSigner("s3cret")
        assert signer.verify(signer.sign({"id": 1, "exp": int(time.time()) - 10})) is None

    def test_empty_secret_rejected(self) -> None:
        from notelink.errors import ConfigurationError

        with pytest.raises(ConfigurationError):
            JWTSigner("")


class TestAuthEnforcement:
    async def test_missing_token(self, events: list[SecurityEvent]) -> None:
        api, spy = _secured_api()
        async with TestClient(api) as client:
            response = await client.get("/me")
        assert response.status == 401
        assert response.json_body() == {
            "error": "Unauthorized",
            "message": "Missing or invalid token",
        }
        assert spy.calls == []
        assert [e.name for e in events] == ["auth.token.missing"]

    async def test_wrong_scheme(self) -> None:
        api, spy = _secured_api()
        async with TestClient(api) as client:
            response = await client.get("/me", headers={"Authorization": "Basic abc"})
        assert response.json_body()["message"] == "Missing or invalid token"
        assert spy.calls == []

    async def test_invalid_token(self, events: list[SecurityEvent]) -> None:
        api, spy = _secured_api()
        async with TestClient(api) as client:
            response = await client.get("/me", headers={"Authorization": "Bearer nope"})
        assert response.status == 401
        assert response.json_body()["message"] == "Invalid or expired token"
        assert spy.calls == []
        assert events[-1].name == "auth.token.invalid"
        assert events[-1].path == "/me"

    async def test_provider_failure(self, events: list[SecurityEvent]) -> None:
        api, spy = _secured_api(RaisingProvider())
        async with TestClient(api) as client:
            response = await client.get("/me", headers={"Authorization": "Bearer x"})
        assert response.status == 401
        assert response.json_body()["message"] == "Token verification failed"
        assert spy.calls == []
        assert events[-1].details == {"error": "RuntimeError"}

    async def test_valid_token(self) -> None:
        api, spy = _secured_api(jwt_secret="s3cret")
        token = JWTSigner("s3cret").sign({"id": 1, "email": "ada@example.com"})
        async with TestClient(api) as client:
            response = await client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status == 200
        assert spy.calls == [{"id": 1, "email": "ada@example.com"}]

    async def test_public_route_needs_no_token(self) -> None:
        api = ApiNote(_config())
        api.documented_route(method="GET", path="/open", handler=lambda ctx: {"user": ctx.user})
        async with TestClient(api) as client:
            response = await client.get("/open")
        assert response.json_body() == {"user": None}

    async def test_handler_can_sign_tokens(self) -> None:
        api = ApiNote(_config(), "s3cret")
        api.documented_route(
            method="POST",
            path="/login",
            handler=lambda ctx: {"token": ctx.jwt.sign({"id": ctx.body["id"]})},
            request_schema={"!id": "number"},
        )
        async with TestClient(api) as client:
            response = await client.post("/login", json={"id": 5})
        token = response.json_body()["token"]
        assert JWTSigner("s3cret").verify(token) == {"id": 5}

    async def test_secured_routes_documented(self) -> None:
        api, _ = _secured_api()
        document = api.openapi()
        assert document["paths"]["/me"]["get"]["security"] == [{"bearerAuth": []}]
        assert document["components"]["securitySchemes"]["bearerAuth"]["scheme"] == "bearer"

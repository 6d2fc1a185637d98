"""Tests for notelink.context — RequestContext and the context variable."""

import pytest

from notelink import ApiConfig, ApiNote, JWTSigner, get_context
from notelink.testing import TestClient


class TestGetContext:
    def test_outside_request_raises(self) -> None:
        with pytest.raises(LookupError):
            get_context()

    async def test_inside_handler(self) -> None:
        api = ApiNote(ApiConfig(title="T", description="", version="1"), "s3cret")

        def handler(ctx):
            current = get_context()
            return {
                "same": current is ctx,
                "method": current.method,
                "path": current.path,
                "url": current.url,
                "cookies": dict(current.cookies),
                "signer": isinstance(current.jwt, JWTSigner),
            }

        api.documented_route(method="GET", path="/ctx", handler=handler)
        async with TestClient(api) as client:
            response = await client.get(
                "/ctx?x=1", headers={"Cookie": "theme=dark"}
            )

        assert response.json_body() == {
            "same": True,
            "method": "GET",
            "path": "/ctx",
            "url": "/ctx?x=1",
            "cookies": {"theme": "dark"},
            "signer": True,
        }

    async def test_reset_after_request(self) -> None:
        api = ApiNote(ApiConfig(title="T", description="", version="1"))
        api.documented_route(method="GET", path="/", handler=lambda ctx: None)
        async with TestClient(api) as client:
            await client.get("/")
        with pytest.raises(LookupError):
            get_context()

"""Inbound HTTP requests.

The engine builds one ``Request`` per ASGI scope. Handlers reach it
through ``RequestContext.request`` when the validated inputs are not
enough.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from notelink._internal.asgi import Receive, Scope
from notelink.errors import ParseError
from notelink.http.headers import Headers, parse_cookies
from notelink.http.query import QueryParams

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class _Body:
    """The request body, drained from ASGI ``receive`` on first read and kept."""

    __slots__ = ("_data", "_receive")

    def __init__(self, receive: Receive) -> None:
        self._receive = receive
        self._data: bytes | None = None

    async def read(self) -> bytes:
        if self._data is None:
            buffer = bytearray()
            more = True
            while more:
                message = await self._receive()
                buffer += message.get("body", b"")
                more = message.get("more_body", False)
            self._data = bytes(buffer)
        return self._data


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request, immutable apart from the lazily read body.

    Copies made with ``with_path_params`` share the body, so reading it
    in middleware does not consume it for the handler.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: dict[str, str] = field(default_factory=dict)
    client: tuple[str, int] | None = None
    _body: _Body | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Build the request for an ASGI ``http`` scope."""
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers") or ())),
            query=QueryParams(scope.get("query_string", b"")),
            client=(client[0], client[1]) if client else None,
            _body=_Body(receive),
        )

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Copy carrying the parameters the router captured."""
        return replace(self, path_params=path_params)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def cookies(self) -> Mapping[str, str]:
        return parse_cookies(self.headers.get("cookie", ""))

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        if not self.query.raw:
            return self.path
        return f"{self.path}?{self.query.raw.decode('latin-1')}"

    # -- Body --

    async def body(self) -> bytes:
        if self._body is None:
            return b""
        return await self._body.read()

    async def text(self) -> str:
        """The body as UTF-8 text. Raises ``ParseError`` when it is not."""
        try:
            return (await self.body()).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Body is not valid UTF-8: {exc}") from exc

    async def json(self) -> Any:
        """The body as JSON; ``None`` for an empty body.

        Raises ``ParseError`` when the body is not valid JSON.
        """
        raw = await self.body()
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise ParseError(f"Malformed JSON body: {exc}") from exc

    async def parsed_body(self) -> Any:
        """Decode the body according to its Content-Type.

        Any JSON media type, or no Content-Type at all, decodes as JSON.
        URL-encoded forms become a dict; everything else is text.
        """
        content_type = (self.content_type or "").lower()
        if not content_type or "json" in content_type:
            return await self.json()
        if FORM_CONTENT_TYPE in content_type:
            return QueryParams(await self.body()).to_dict()
        return await self.text()

"""Outbound HTTP responses.

Handlers rarely build these directly; return values are negotiated into
one. Return a ``Response`` when the status, content type or headers must
be exact.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"

type HeaderPairs = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True, slots=True)
class Response:
    """An immutable response.

    ``with_*`` methods return modified copies::

        Response.json({"id": 1}, status=201).with_header("Location", "/todos/1")
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = TEXT_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json(cls, data: Any, status: int = 200) -> Response:
        """*data* serialized as JSON. Values JSON cannot encode are sent as ``str()``."""
        return cls(json.dumps(data, default=str), status, JSON_CONTENT_TYPE)

    @classmethod
    def html(cls, body: str, status: int = 200) -> Response:
        return cls(body, status, HTML_CONTENT_TYPE)

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return self.with_headers(((name, value),))

    def with_headers(self, headers: HeaderPairs) -> Response:
        """Copy with *headers* appended; a mapping or ``(name, value)`` pairs."""
        pairs = tuple(headers.items() if isinstance(headers, Mapping) else headers)
        if not pairs:
            return self
        return replace(self, headers=self.headers + pairs)

    def header(self, name: str) -> str | None:
        """First value of header *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body

    def json_body(self) -> Any:
        return json.loads(self.body_bytes)

"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, fully predictable:

- ``Response``: passed through (context headers are still added)
- ``None``: empty body
- ``str``: ``text/plain``
- ``bytes``: ``application/octet-stream``
- pydantic model: JSON of its dump
- ``dict``, ``list``, ``tuple``, numbers, booleans: JSON

The status is the one the handler set on its context (200 by default).
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from notelink.http.response import Response


def negotiate(
    value: Any,
    *,
    status: int = 200,
    headers: Iterable[tuple[str, str]] = (),
) -> Response:
    """Convert a handler's return value to a Response."""
    match value:
        case Response():
            response = value
        case None:
            response = Response(body="", status=status)
        case str():
            response = Response(body=value, status=status)
        case bytes() | bytearray():
            response = Response(
                body=bytes(value), status=status, content_type="application/octet-stream"
            )
        case BaseModel():
            response = Response.json(value.model_dump(mode="json", by_alias=True), status=status)
        case dict() | list() | tuple() | int() | float():
            response = Response.json(value, status=status)
        case _:
            msg = (
                f"Handler returned {type(value).__name__}, which cannot be sent. "
                "Return a dict, list, str, bytes, pydantic model or Response."
            )
            raise TypeError(msg)
    return response.with_headers(headers)

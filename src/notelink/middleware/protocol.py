"""The middleware contract.

Middleware wraps the whole engine: it sees documented routes, raw
routes and the documentation endpoints alike, before routing happens.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from notelink.http.request import Request
from notelink.http.response import Response

type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """``async (request, next) -> Response``; a function or an object with ``__call__``.

    Call ``next(request)`` to continue down the pipeline, or return a
    response without calling it to answer early::

        async def require_json(request: Request, next: Next) -> Response:
            if request.method == "POST" and "json" not in (request.content_type or ""):
                return Response.json({"error": "JSON only"}, status=415)
            return await next(request)

        api = ApiNote(ApiConfig(..., middleware=(require_json,)))
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...

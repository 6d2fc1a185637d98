"""JWT exposure middleware.

Makes the registry's JWT provider reachable from anywhere in a request
(``RequestContext.jwt``, ``current_jwt()``) so handlers can sign tokens,
for example on login. It authenticates nothing; enforcement happens in
the wrapped handler of each route that requires auth.
"""

from contextvars import ContextVar

from notelink.http.request import Request
from notelink.http.response import Response
from notelink.middleware.protocol import Next
from notelink.security.tokens import JWTProvider

_jwt_var: ContextVar[JWTProvider | None] = ContextVar("notelink_jwt", default=None)


def current_jwt() -> JWTProvider | None:
    """The JWT provider of the request being handled, if any."""
    return _jwt_var.get()


class JWTMiddleware:
    """Exposes a ``JWTProvider`` for the duration of each request."""

    __slots__ = ("provider",)

    def __init__(self, provider: JWTProvider) -> None:
        self.provider = provider

    async def __call__(self, request: Request, next: Next) -> Response:
        token = _jwt_var.set(self.provider)
        try:
            return await next(request)
        finally:
            _jwt_var.reset(token)

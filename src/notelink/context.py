"""Request context handed to every route handler.

``RequestContext`` carries the validated request data (path params,
query, headers, body), the authenticated principal, the JWT provider,
and a settable response status. The engine also publishes it in a
``ContextVar`` for code that runs deeper in the call stack than the
handler signature reaches.

Thread safety:
    ``ContextVar`` is task-local under asyncio. No locks needed.
"""

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from notelink.http.request import Request
from notelink.middleware.auth import current_jwt
from notelink.security.tokens import JWTProvider


@dataclass(slots=True)
class RequestContext:
    """Per-request context passed to handlers.

    Usage::

        def get_user(ctx: RequestContext) -> dict:
            user_id = ctx.params["id"]  # already an int for a "number" param
            if user_id not in users:
                ctx.set_status(404)
                return {"error": "not found"}
            return users[user_id]

    ``user`` is the verified token payload on routes that require auth
    and ``None`` everywhere else.
    """

    request: Request
    params: dict[str, Any]
    query: dict[str, Any]
    headers: Mapping[str, Any]
    body: Any = None
    user: Any = None
    status: int = 200
    response_headers: list[tuple[str, str]] = field(default_factory=list)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def cookies(self) -> Mapping[str, str]:
        return self.request.cookies

    @property
    def jwt(self) -> JWTProvider | None:
        """The registry's JWT provider, for signing tokens in handlers."""
        return current_jwt()

    def set_status(self, status: int) -> None:
        """Set the status of the response the handler's return value becomes."""
        self.status = status

    def set_header(self, name: str, value: str) -> None:
        """Add a header to the response."""
        self.response_headers.append((name, value))


context_var: ContextVar[RequestContext] = ContextVar("notelink_context")
"""The context of the handler currently running. Set by the engine."""


def get_context() -> RequestContext:
    """Return the current request context.

    Raises ``LookupError`` if called outside a route handler.
    """
    return context_var.get()

"""Handler wrapping — authentication in front, exception containment behind.

Every documented route's handler runs inside the wrapper built here:

1. If the route requires auth, the bearer token is verified first. Any
   failure answers 401 and the handler never runs.
2. The handler runs. Whatever it raises is turned into a 500 response
   carrying the exception message.

The wrapper returns values, never raises, so engine-level error handling
only ever sees engine errors.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from notelink._internal.invoke import invoke
from notelink.context import RequestContext
from notelink.routes.descriptor import RouteDescriptor
from notelink.security.audit import emit_security_event
from notelink.security.tokens import JWTProvider

logger = logging.getLogger("notelink.server")
auth_logger = logging.getLogger("notelink.auth")

BEARER_PREFIX = "Bearer "

MISSING_TOKEN = "Missing or invalid token"
INVALID_TOKEN = "Invalid or expired token"
VERIFICATION_FAILED = "Token verification failed"


def unauthorized(ctx: RequestContext, message: str) -> dict[str, str]:
    ctx.set_status(401)
    return {"error": "Unauthorized", "message": message}


def internal_error(ctx: RequestContext, exc: Exception) -> dict[str, str]:
    """The 500 body for *exc*.

    The message is the exception's own, even when empty. An exception
    raised without arguments (``raise RuntimeError``) carries no message
    and gets a generic one.
    """
    ctx.set_status(500)
    message = str(exc) if exc.args else "Unknown error"
    return {"error": "Internal Server Error", "message": message}


async def authenticate(ctx: RequestContext, jwt: JWTProvider) -> dict[str, str] | None:
    """Verify the bearer token on *ctx*.

    Returns ``None`` and sets ``ctx.user`` on success, or the 401 body
    to send on failure.
    """
    header = ctx.request.headers.get("authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        emit_security_event("auth.token.missing", request=ctx.request)
        return unauthorized(ctx, MISSING_TOKEN)

    token = header[len(BEARER_PREFIX) :].strip()
    try:
        payload = await invoke(jwt.verify, token)
    except Exception as exc:
        auth_logger.warning("Token verification raised for %s: %s", ctx.url, exc)
        emit_security_event(
            "auth.token.error", request=ctx.request, details={"error": type(exc).__name__}
        )
        return unauthorized(ctx, VERIFICATION_FAILED)

    if not payload:
        emit_security_event("auth.token.invalid", request=ctx.request)
        return unauthorized(ctx, INVALID_TOKEN)

    ctx.user = payload
    return None


def wrap_handler(
    descriptor: RouteDescriptor,
    jwt: JWTProvider,
) -> Callable[[RequestContext], Awaitable[Any]]:
    """Build the engine-facing handler for *descriptor*."""
    handler = descriptor.handler
    requires_auth = descriptor.requires_auth

    @functools.wraps(handler)
    async def wrapped(ctx: RequestContext) -> Any:
        if requires_auth:
            denied = await authenticate(ctx, jwt)
            if denied is not None:
                return denied
        try:
            return await invoke(handler, ctx)
        except Exception as exc:
            logger.exception("Handler for %s failed", descriptor.operation)
            return internal_error(ctx, exc)

    return wrapped

"""ASGI handler — translates ASGI scope/messages to notelink types.

The only component that touches raw ASGI HTTP messages. Builds a
Request, runs it through the middleware pipeline to the router, validates
the matched route's inputs, calls the handler with a RequestContext, and
sends the negotiated Response back.
"""

import logging
from typing import Any

from pydantic import ValidationError

from notelink._internal.asgi import Receive, Scope, Send
from notelink._internal.invoke import invoke
from notelink._internal.types import ErrorResponder
from notelink.context import RequestContext, context_var
from notelink.errors import EngineError, RequestValidationError
from notelink.http.request import Request
from notelink.http.response import Response
from notelink.middleware.pipeline import MiddlewarePipeline
from notelink.routes.compiler import CompiledRouteSchema
from notelink.routes.descriptor import BODY_METHODS
from notelink.routing.route import RouteMatch
from notelink.routing.router import Router
from notelink.schema.inputs import Compiled
from notelink.server.errors import handle_engine_error, handle_unexpected_error
from notelink.server.negotiation import negotiate
from notelink.server.sender import send_response

logger = logging.getLogger("notelink.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: MiddlewarePipeline,
    error_responder: ErrorResponder | None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    async def dispatch(req: Request) -> Response:
        match = router.match(req.method, req.path)
        return await invoke_route(match, req.with_path_params(match.path_params))

    try:
        response = await middleware.wrap(dispatch)(request)
    except EngineError as exc:
        response = await handle_engine_error(exc, request, error_responder)
    except Exception as exc:
        response = await handle_unexpected_error(exc, request, error_responder)

    await send_response(response, send, method=request.method)


async def invoke_route(match: RouteMatch, request: Request) -> Response:
    """Build the context for the matched route, call its handler, negotiate."""
    route = match.route
    if route.schema is None:
        ctx = await raw_context(request)
    else:
        ctx = await validated_context(route.schema, request)

    token = context_var.set(ctx)
    try:
        result = await invoke(route.handler, ctx)
    finally:
        context_var.reset(token)

    return negotiate(result, status=ctx.status, headers=ctx.response_headers)


async def raw_context(request: Request) -> RequestContext:
    """Context for a raw route: unvalidated inputs, body parsed when one is expected."""
    body = await request.parsed_body() if request.method in BODY_METHODS else None
    return RequestContext(
        request=request,
        params=dict(request.path_params),
        query=request.query.to_dict(),
        headers=request.headers,
        body=body,
    )


async def validated_context(schema: CompiledRouteSchema, request: Request) -> RequestContext:
    """Context for a documented route, every declared location validated.

    Raises ``RequestValidationError`` for the first location that fails
    and ``ParseError`` for a body that cannot be decoded.
    """
    params = _validate(schema.params, dict(request.path_params), "path parameters")
    query = _validate(schema.query, request.query.to_dict(), "query")
    headers: Any = request.headers
    if schema.headers is not None:
        headers = _validate(schema.headers, request.headers.to_dict(), "headers")

    body = None
    if schema.body is not None:
        body = _validate(schema.body, await request.parsed_body(), "body")

    return RequestContext(request=request, params=params, query=query, headers=headers, body=body)


def _validate(compiled: Compiled | None, data: Any, location: str) -> Any:
    if compiled is None:
        return data
    try:
        return compiled.validate(data)
    except ValidationError as exc:
        raise RequestValidationError(location, _summarize(exc)) from exc


def _summarize(exc: ValidationError) -> str:
    """One line per failing field: ``loc: message``."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)

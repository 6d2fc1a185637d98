"""Engine error handling.

Maps ``EngineError`` (routing, validation, body parsing) and unexpected
failures to Response objects. When an error responder is installed it
answers everything; otherwise each engine error gets its own status and
anything else a 500.
"""

import logging

from notelink._internal.invoke import invoke
from notelink._internal.types import ErrorResponder
from notelink.errors import EngineError
from notelink.http.request import Request
from notelink.http.response import Response
from notelink.server.negotiation import negotiate

logger = logging.getLogger("notelink.server")


def error_body(code: str, message: str) -> dict[str, str]:
    return {"code": code, "message": message}


def default_error_response(exc: EngineError) -> Response:
    """The engine's own answer to an engine error: ``{code, message}`` with its status."""
    return Response.json(error_body(exc.code, exc.message), status=exc.status).with_headers(
        exc.headers
    )


def _internal_error_response() -> Response:
    return Response.json(error_body("UNKNOWN", "Internal Server Error"), status=500)


async def _respond_with(
    responder: ErrorResponder,
    request: Request,
    exc: Exception,
) -> Response:
    try:
        result = await invoke(responder, request, exc)
    except Exception:
        logger.exception("Error responder failed while handling %r", exc)
        return _internal_error_response()
    if isinstance(result, Response):
        return result
    return negotiate(result)


async def handle_engine_error(
    exc: EngineError,
    request: Request,
    responder: ErrorResponder | None,
) -> Response:
    """Answer an error the engine raised before or around the handler."""
    logger.debug("%s %s -> %s", request.method, request.path, exc)
    if responder is None:
        return default_error_response(exc)
    return await _respond_with(responder, request, exc)


async def handle_unexpected_error(
    exc: Exception,
    request: Request,
    responder: ErrorResponder | None,
) -> Response:
    """Answer an exception that escaped the middleware pipeline."""
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    if responder is None:
        return _internal_error_response()
    return await _respond_with(responder, request, exc)

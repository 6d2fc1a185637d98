"""NoteLink — documented HTTP APIs from declarative route descriptors.

Each route is declared once, with its parameters, body schema and
responses in compact notation. NoteLink validates requests against it,
enforces JWT auth where asked, and serves an OpenAPI document plus an
interactive reference page.

Basic usage::

    from notelink import ApiConfig, ApiNote, Parameter

    api = ApiNote(ApiConfig(title="Todo API", description="Todos", version="1.0.0"))

    api.documented_route(
        method="POST",
        path="/todos",
        handler=create_todo,
        request_schema={"!title": "string", "done": "boolean"},
        responses={201: "Created"},
    )

    api.start(3000)
"""

__version__ = "0.1.0"
__all__ = [
    "ApiConfig",
    "ApiNote",
    "CORSConfig",
    "Compiled",
    "ConfigurationError",
    "EngineError",
    "FieldSpec",
    "JWTSigner",
    "Middleware",
    "Next",
    "NoteLinkError",
    "Parameter",
    "Raw",
    "Request",
    "RequestContext",
    "Response",
    "ResponseDefinition",
    "RouteDescriptor",
    "StartupError",
    "field",
    "get_context",
    "new_api_note",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import notelink`` fast while providing a clean top-level API.
    """
    if name in ("ApiNote", "new_api_note"):
        from notelink import api as _api

        return getattr(_api, name)

    if name == "ApiConfig":
        from notelink.config import ApiConfig

        return ApiConfig

    if name in ("RequestContext", "get_context"):
        from notelink import context as _ctx

        return getattr(_ctx, name)

    if name == "RouteDescriptor":
        from notelink.routes.descriptor import RouteDescriptor

        return RouteDescriptor

    if name in ("FieldSpec", "field"):
        from notelink.schema import fields as _fields

        return getattr(_fields, name)

    if name in ("Raw", "Compiled"):
        from notelink.schema import inputs as _inputs

        return getattr(_inputs, name)

    if name == "Parameter":
        from notelink.schema.params import Parameter

        return Parameter

    if name == "ResponseDefinition":
        from notelink.schema.responses import ResponseDefinition

        return ResponseDefinition

    if name == "Request":
        from notelink.http.request import Request

        return Request

    if name == "Response":
        from notelink.http.response import Response

        return Response

    if name in ("Middleware", "Next"):
        from notelink.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "CORSConfig":
        from notelink.middleware.builtin import CORSConfig

        return CORSConfig

    if name == "JWTSigner":
        from notelink.security.tokens import JWTSigner

        return JWTSigner

    if name in ("ConfigurationError", "EngineError", "NoteLinkError", "StartupError"):
        from notelink import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""The API registry — routes, documentation and server lifecycle in one place.

Lifecycle:
    1. Setup phase: create ``ApiNote``, register routes.
    2. Freeze: the first request or ``start()`` compiles
       the engine's route table and installs the error responder.
    3. Runtime: the route table is read-only; registration raises.

The registry is an ASGI application, so it can also be served by any
ASGI server or driven in-process by ``notelink.testing.TestClient``.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from notelink._internal.asgi import Receive, Scope, Send
from notelink._internal.types import Handler
from notelink.config import ApiConfig
from notelink.context import RequestContext
from notelink.docs.openapi import DocumentedRoute, build_openapi_document
from notelink.docs.ui import render_docs_page
from notelink.errors import EngineError
from notelink.http.request import Request
from notelink.http.response import Response
from notelink.middleware.pipeline import MiddlewarePipeline, build_pipeline
from notelink.routes.compiler import compile_route
from notelink.routes.descriptor import RouteDescriptor, normalize_method
from notelink.routes.wrap import wrap_handler
from notelink.security.tokens import JWTProvider, JWTSigner
from notelink.server.engine import AsgiEngine, Engine, ReadyCallback

logger = logging.getLogger("notelink.registry")

_REPEATED_SLASHES = re.compile(r"/{2,}")


def fallback_error_response(request: Request, exc: Exception) -> Response:
    """Answer every engine error with 400 and ``{code, message}``."""
    if isinstance(exc, EngineError):
        code, message, headers = exc.code, exc.message, exc.headers
    else:
        code, message, headers = "UNKNOWN", str(exc) or type(exc).__name__, ()
    logger.error("[onError] %s %s %s %s", code, request.method, request.url, message)
    return Response.json({"code": code, "message": message}, status=400).with_headers(headers)


class ApiNote:
    """A documented API.

    Usage::

        api = ApiNote(ApiConfig(title="Todo API", description="Todos", version="1.0.0"))

        api.documented_route(
            method="GET",
            path="/todos/:id",
            handler=get_todo,
            params=[Parameter("id", "path", type="number", required=True)],
            responses={200: "The todo", 404: "Not found"},
            tags=["Todos"],
        )

        api.start(3000)  # blocks; docs at http://localhost:3000/doc-api
    """

    __slots__ = (
        "_documented",
        "_engine",
        "_freeze_lock",
        "_frozen",
        "_jwt",
        "_pipeline",
        "_routes",
        "config",
    )

    def __init__(
        self,
        config: ApiConfig,
        jwt_secret: str | None = None,
        *,
        engine: Engine | None = None,
        jwt: JWTProvider | None = None,
    ) -> None:
        if jwt_secret is not None:
            config = replace(config, jwt_secret=jwt_secret)
        self.config = config

        self._jwt: JWTProvider = jwt or JWTSigner(
            config.jwt_secret,
            algorithm=config.jwt_algorithm,
            expires_in=config.jwt_expires_in,
        )
        self._pipeline: MiddlewarePipeline = build_pipeline(
            self._jwt, config.cors, config.middleware
        )
        self._engine: Engine = engine or AsgiEngine(
            workers=config.workers, log_level=config.log_level
        )
        self._engine.set_middleware(self._pipeline)

        self._routes: list[RouteDescriptor] = []
        self._documented: list[DocumentedRoute] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

        self._register_docs_routes()

    # -- Registration --

    def register(self, descriptor: RouteDescriptor) -> ApiNote:
        """Compile, wrap and register a documented route. Returns ``self``."""
        self._check_not_frozen()
        full_path = self.resolve_path(descriptor.path)
        schema = compile_route(descriptor)
        handler = wrap_handler(descriptor, self._jwt)

        self._engine.register_route(descriptor.method, full_path, handler, schema)
        self._routes.append(descriptor)
        self._documented.append(DocumentedRoute(descriptor.method, full_path, schema))
        logger.debug("Registered %s %s", descriptor.method, full_path)
        return self

    def documented_route(self, **fields: Any) -> ApiNote:
        """Build a ``RouteDescriptor`` from keyword fields and register it."""
        return self.register(RouteDescriptor(**fields))

    def route(self, method: str, path: str, **fields: Any) -> Callable[[Handler], Handler]:
        """Decorator form of ``documented_route``::

            @api.route("GET", "/health", summary="Health check")
            def health(ctx):
                return {"status": "ok"}
        """

        def decorator(handler: Handler) -> Handler:
            self.documented_route(method=method, path=path, handler=handler, **fields)
            return handler

        return decorator

    def register_raw(self, method: str, path: str, handler: Handler) -> ApiNote:
        """Register an undocumented route.

        Raw routes skip validation, authentication and exception
        containment, and never appear in the documentation.
        """
        self._check_not_frozen()
        method = normalize_method(method)
        full_path = self.resolve_path(path)
        self._engine.register_route(method, full_path, handler, None, hidden=True)
        logger.debug("Registered raw %s %s", method, full_path)
        return self

    @property
    def routes(self) -> list[RouteDescriptor]:
        """Registered documented routes, in registration order. A copy."""
        return list(self._routes)

    # -- Resolution --

    def resolve_path(self, path: str) -> str:
        """Join the base path and *path*, collapsing repeated slashes."""
        return _REPEATED_SLASHES.sub("/", f"{self.config.base_path}{path}")

    def resolve_port(self, port: int | None = None) -> int:
        """A port embedded in ``config.host`` wins, then *port*, then the default."""
        host_port = self.config.host_port
        if host_port is not None:
            return host_port
        if port is not None:
            return port
        return self.config.default_port

    # -- Documentation --

    def openapi(self) -> dict[str, Any]:
        """The OpenAPI document for every documented route."""
        return build_openapi_document(self.config, self._documented)

    def _register_docs_routes(self) -> None:
        docs_path = self.config.docs_path.rstrip("/") or "/"
        json_path = _REPEATED_SLASHES.sub("/", f"{docs_path}/json")

        def docs_json(ctx: RequestContext) -> dict[str, Any]:
            return self.openapi()

        def docs_page(ctx: RequestContext) -> Response:
            return Response.html(render_docs_page(self.config.title, json_path))

        self._engine.register_route("GET", json_path, docs_json, None, hidden=True)
        self._engine.register_route("GET", docs_path, docs_page, None, hidden=True)

    # -- Lifecycle --

    def start(self, port: int | None = None, *, on_ready: ReadyCallback | None = None) -> int:
        """Serve the API until the server shuts down. Blocks.

        Raises ``StartupError`` when the listening address cannot be
        bound. *on_ready* is called with ``(host, port)`` once the
        address is known to be free, before serving begins. Returns the
        port that was served.
        """
        listen_port = self.resolve_port(port)
        self._ensure_frozen()
        logger.info(
            "Starting %s %s on %s:%d",
            self.config.title,
            self.config.version,
            self.config.bind_host,
            listen_port,
        )
        self._engine.bind_and_listen(self.config.bind_host, listen_port, on_ready=on_ready)
        return listen_port

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register routes after the API has started serving requests. "
                "Register all routes before calling start()."
            )
            raise RuntimeError(msg)

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """MUST only be called while holding _freeze_lock."""
        self._engine.set_error_responder(fallback_error_response)
        self._engine.freeze()
        self._frozen = True
        logger.debug("Frozen with %d documented routes", len(self._routes))

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        self._ensure_frozen()
        await self._engine(scope, receive, send)


def new_api_note(config: ApiConfig, jwt_secret: str | None = None) -> ApiNote:
    """Create an ``ApiNote`` with the default engine and JWT signer."""
    return ApiNote(config, jwt_secret)

"""The HTTP engine the registry drives.

``Engine`` is the narrow contract the registry depends on. ``AsgiEngine``
implements it as an ASGI application: routes are collected during setup,
compiled into a ``Router`` on freeze, and served through pounce.
"""

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from notelink._internal.asgi import Receive, Scope, Send
from notelink._internal.types import EngineHandler, ErrorResponder
from notelink.middleware.pipeline import MiddlewarePipeline
from notelink.routes.compiler import CompiledRouteSchema
from notelink.routing.route import Route
from notelink.routing.router import Router
from notelink.server.handler import handle_request
from notelink.server.runner import probe_bind, run_server

logger = logging.getLogger("notelink.server")

type ReadyCallback = Callable[[str, int], None]


class Engine(Protocol):
    """What the registry needs from an HTTP engine."""

    def register_route(
        self,
        method: str,
        path: str,
        handler: EngineHandler,
        schema: CompiledRouteSchema | None = None,
        *,
        hidden: bool = False,
    ) -> None: ...

    def set_error_responder(self, responder: ErrorResponder) -> None: ...

    def set_middleware(self, pipeline: MiddlewarePipeline) -> None: ...

    def freeze(self) -> None: ...

    def bind_and_listen(
        self, host: str, port: int, *, on_ready: ReadyCallback | None = None
    ) -> None: ...

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None: ...


class AsgiEngine:
    """ASGI engine with a trie router.

    Mutable until ``freeze()``; after that registration raises
    ``RuntimeError`` and the route table is read-only.
    """

    __slots__ = (
        "_error_responder",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_pending",
        "_router",
        "log_level",
        "workers",
    )

    def __init__(self, *, workers: int = 1, log_level: str = "info") -> None:
        self._pending: list[Route] = []
        self._router: Router | None = None
        self._middleware = MiddlewarePipeline()
        self._error_responder: ErrorResponder | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self.workers = workers
        self.log_level = log_level

    # -- Setup --

    def register_route(
        self,
        method: str,
        path: str,
        handler: EngineHandler,
        schema: CompiledRouteSchema | None = None,
        *,
        hidden: bool = False,
    ) -> None:
        self._check_not_frozen()
        self._pending.append(
            Route(
                path=path,
                handler=handler,
                methods=frozenset({method.upper()}),
                schema=schema,
                hidden=hidden,
            )
        )

    def set_error_responder(self, responder: ErrorResponder) -> None:
        self._check_not_frozen()
        self._error_responder = responder

    def set_middleware(self, pipeline: MiddlewarePipeline) -> None:
        self._check_not_frozen()
        self._middleware = pipeline

    @property
    def routes(self) -> list[Route]:
        """Registered routes in registration order (a replaced route is dropped)."""
        if self._router is not None:
            live = {id(route) for route in self._router.routes}
            return [route for route in self._pending if id(route) in live]
        return list(self._pending)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the engine after it has started serving requests."
            raise RuntimeError(msg)

    # -- Freeze --

    def freeze(self) -> None:
        """Compile the route table. Safe to call more than once."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            router = Router()
            for route in self._pending:
                router.add(route)
            router.compile()
            self._router = router
            self._frozen = True
            logger.debug("Engine frozen with %d routes", len(self._pending))

    # -- Serving --

    def bind_and_listen(
        self, host: str, port: int, *, on_ready: ReadyCallback | None = None
    ) -> None:
        """Serve until shut down. Blocks.

        Raises ``StartupError`` if the address cannot be bound; *on_ready*
        runs once the address is known to be free.
        """
        self.freeze()
        probe_bind(host, port)
        if on_ready is not None:
            on_ready(host, port)
        run_server(self, host, port, workers=self.workers, log_level=self.log_level)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self.freeze()
        assert self._router is not None
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_responder=self._error_responder,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup and acknowledge lifespan messages."""
        self.freeze()
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

"""The ordered, immutable middleware pipeline.

Built once by the registry: JWT exposure first, then CORS (unless
disabled), then the user's middleware in the order configured.
"""

from collections.abc import Awaitable, Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass

from notelink.http.request import Request
from notelink.http.response import Response
from notelink.middleware.auth import JWTMiddleware
from notelink.middleware.builtin import CORSConfig, CORSMiddleware
from notelink.middleware.protocol import Middleware, Next
from notelink.security.tokens import JWTProvider


@dataclass(frozen=True, slots=True)
class MiddlewarePipeline:
    """Middleware in execution order. The first entry sees the request first."""

    stages: tuple[Middleware, ...] = ()

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)

    def wrap(self, dispatch: Callable[[Request], Awaitable[Response]]) -> Next:
        """Compose the stages around *dispatch*, outermost first."""
        handler: Next = dispatch
        for mw in reversed(self.stages):
            handler = _bind(mw, handler)
        return handler


def _bind(mw: Middleware, nxt: Next) -> Next:
    async def wrapped(req: Request) -> Response:
        return await mw(req, nxt)

    return wrapped


def build_pipeline(
    jwt: JWTProvider,
    cors: CORSConfig | None,
    custom: Sequence[Middleware] | Iterable[Middleware] = (),
) -> MiddlewarePipeline:
    """Assemble the registry's pipeline from its configuration."""
    stages: list[Middleware] = [JWTMiddleware(jwt)]
    if cors is not None:
        stages.append(CORSMiddleware(cors))
    stages.extend(custom)
    return MiddlewarePipeline(tuple(stages))

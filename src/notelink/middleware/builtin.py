"""Built-in middleware: CORS.

The registry installs ``CORSMiddleware`` with a permissive policy unless
``ApiConfig.cors`` is set to ``None``. Preflight requests are answered
directly; every other cross-origin response gets the allow headers.
"""

from dataclasses import dataclass

from notelink.http.request import Request
from notelink.http.response import Response
from notelink.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS policy.

    The bare defaults allow nothing; ``ApiConfig`` supplies a permissive
    policy (any origin, the common methods, ``Content-Type`` and
    ``Authorization`` headers). Narrow it with::

        ApiConfig(..., cors=CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        ))
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # seconds

    def allows(self, origin: str) -> bool:
        return "*" in self.allow_origins or origin in self.allow_origins

    def origin_headers(self, origin: str) -> list[tuple[str, str]]:
        """Headers every cross-origin response carries."""
        headers: list[tuple[str, str]] = []
        if "*" in self.allow_origins and not self.allow_credentials:
            headers.append(("Access-Control-Allow-Origin", "*"))
        else:
            headers.append(("Access-Control-Allow-Origin", origin))
            headers.append(("Vary", "Origin"))
        if self.allow_credentials:
            headers.append(("Access-Control-Allow-Credentials", "true"))
        if self.expose_headers:
            headers.append(("Access-Control-Expose-Headers", ", ".join(self.expose_headers)))
        return headers

    def preflight_headers(self, origin: str, requested_headers: str | None) -> list[tuple[str, str]]:
        """Headers for a 204 preflight answer.

        With a wildcard header policy the headers the browser asked for
        are echoed back.
        """
        headers = self.origin_headers(origin)
        headers.append(("Access-Control-Allow-Methods", ", ".join(self.allow_methods)))
        if "*" in self.allow_headers and requested_headers:
            headers.append(("Access-Control-Allow-Headers", requested_headers))
        elif self.allow_headers:
            headers.append(("Access-Control-Allow-Headers", ", ".join(self.allow_headers)))
        headers.append(("Access-Control-Max-Age", str(self.max_age)))
        return headers


class CORSMiddleware:
    """Cross-origin resource sharing.

    Requests without an ``Origin`` header, or from an origin the policy
    does not allow, pass through untouched.
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    async def __call__(self, request: Request, next: Next) -> Response:
        origin = request.headers.get("origin")
        if origin is None or not self.config.allows(origin):
            return await next(request)

        # Preflight: answered here, before routing
        if request.method == "OPTIONS" and request.headers.get("access-control-request-method"):
            requested = request.headers.get("access-control-request-headers")
            return Response(body="", status=204).with_headers(
                self.config.preflight_headers(origin, requested)
            )

        response = await next(request)
        return response.with_headers(self.config.origin_headers(origin))

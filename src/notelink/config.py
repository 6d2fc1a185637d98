"""API configuration.

Supplied once when the registry is built and never modified afterwards.
The OpenAPI metadata, server address, JWT settings and middleware all
live here.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from notelink.middleware.builtin import CORSConfig


def _permissive_cors() -> CORSConfig:
    return CORSConfig(
        allow_origins=("*",),
        allow_methods=("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"),
        allow_headers=("Content-Type", "Authorization"),
    )


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """API configuration. Immutable after creation.

    ``title``, ``description`` and ``version`` feed the generated OpenAPI
    document. Everything else has a default::

        config = ApiConfig(
            title="Todo API",
            description="A simple todo management API",
            version="1.0.0",
            host="localhost:8080",
            base_path="/api",
        )
    """

    title: str
    description: str
    version: str

    # Server: a port embedded in ``host`` ("localhost:3000") wins over start(port)
    host: str = "localhost"
    bind_host: str = "127.0.0.1"
    default_port: int = 8080
    base_path: str = "/"

    # JWT
    jwt_secret: str = "default-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expires_in: int | None = None  # seconds; None = tokens never expire

    # Documentation
    docs_path: str = "/doc-api"

    # Middleware: CORS runs after JWT exposure, custom middleware last
    cors: CORSConfig | None = field(default_factory=_permissive_cors)
    middleware: tuple[Callable[..., Any], ...] = ()

    # Server runtime (forwarded to pounce)
    workers: int = 1
    log_level: str = "info"

    @property
    def host_name(self) -> str:
        """Host without any embedded port."""
        return self.host.split(":", 1)[0]

    @property
    def host_port(self) -> int | None:
        """Port embedded in ``host`` (``"localhost:3000"`` -> 3000), if any."""
        _, sep, port = self.host.partition(":")
        if not sep or not port:
            return None
        try:
            return int(port)
        except ValueError:
            return None

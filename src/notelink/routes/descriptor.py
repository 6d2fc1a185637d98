"""Route descriptors — everything the registry needs to know about one route."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from notelink._internal.types import Handler
from notelink.errors import ConfigurationError
from notelink.schema.params import Parameter, as_parameter
from notelink.schema.responses import ResponseEntry

HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"}
)

# Methods that carry a body even when no request schema is declared
BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH"})


def normalize_method(method: str) -> str:
    """Upper-case *method* and check it is a supported HTTP method."""
    normalized = method.upper()
    if normalized not in HTTP_METHODS:
        msg = (
            f"Unsupported HTTP method {method!r}. "
            f"Expected one of: {', '.join(sorted(HTTP_METHODS))}"
        )
        raise ConfigurationError(msg)
    return normalized


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A documented route.

    Usage::

        RouteDescriptor(
            method="POST",
            path="/users",
            handler=create_user,
            summary="Create user",
            request_schema={"!name": "string", "age": "number"},
            responses={201: "Created", 400: "Invalid body"},
            tags=("Users",),
        )

    ``params`` accepts ``Parameter`` instances or mappings with an
    ``in`` key. ``responses`` maps status codes to a description, a
    ``ResponseDefinition`` or a ``{"description", "schema"}`` mapping.
    Collections are frozen on construction.
    """

    method: str
    path: str
    handler: Handler
    description: str | None = None
    summary: str | None = None
    params: tuple[Parameter, ...] = ()
    request_schema: Any = None
    response_schema: Any = None
    responses: Mapping[str | int, ResponseEntry] | None = None
    tags: tuple[str, ...] = ()
    requires_auth: bool = False

    def __post_init__(self) -> None:
        if not callable(self.handler):
            msg = f"Handler for {self.method} {self.path} is not callable: {self.handler!r}"
            raise ConfigurationError(msg)
        if not self.path.startswith("/"):
            msg = f"Route path must start with '/': {self.path!r}"
            raise ConfigurationError(msg)

        object.__setattr__(self, "method", normalize_method(self.method))
        object.__setattr__(self, "params", tuple(as_parameter(p) for p in self.params))
        object.__setattr__(self, "tags", _as_tags(self.tags))
        if self.responses is not None:
            object.__setattr__(self, "responses", MappingProxyType(dict(self.responses)))

    @property
    def operation(self) -> str:
        """``METHOD path`` — used in logs and as the summary of last resort."""
        return f"{self.method} {self.path}"


def _as_tags(tags: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(tags, str):
        return (tags,)
    return tuple(tags)

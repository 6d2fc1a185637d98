"""NoteLink exception hierarchy.

Shared across the schema compiler, the registry, and the HTTP engine so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class NoteLinkError(Exception):
    """Base for all notelink-specific errors."""


class ConfigurationError(NoteLinkError):
    """Raised when a route descriptor or the API configuration is invalid.

    Surfaces at registration time, never per request.
    """


class StartupError(NoteLinkError):
    """Raised by ``ApiNote.start()`` when the listening socket cannot be bound."""


@dataclass(frozen=True, slots=True)
class EngineError(NoteLinkError):
    """An error raised by the HTTP engine itself, outside any route handler.

    ``code`` is a stable machine-readable tag (``NOT_FOUND``, ``VALIDATION``,
    ...). ``status`` is only used when no fallback error responder is
    installed; the registry's responder answers every engine error with 400.
    """

    code: str
    message: str = ""
    status: int = 400
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code


class NotFound(EngineError):  # noqa: N818 (conventional name in web frameworks)
    """No route matched the request path."""

    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(code="NOT_FOUND", message=message, status=404)


class MethodNotAllowed(EngineError):  # noqa: N818 (conventional name in web frameworks)
    """A route exists for the path but not for this HTTP method."""

    def __init__(self, allowed: frozenset[str], message: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            code="METHOD_NOT_ALLOWED",
            message=message or f"Method not allowed. Allowed methods: {allow_value}",
            status=405,
            headers=(("Allow", allow_value),),
        )


class RequestValidationError(EngineError):
    """Inbound query, path, header, or body data failed schema validation."""

    def __init__(self, location: str, message: str) -> None:
        super().__init__(
            code="VALIDATION",
            message=f"Invalid {location}: {message}",
            status=422,
        )


class ParseError(EngineError):
    """The request body could not be decoded."""

    def __init__(self, message: str = "Malformed request body") -> None:
        super().__init__(code="PARSE", message=message, status=400)

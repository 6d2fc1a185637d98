"""Security — JWT tokens and authentication audit events."""

from notelink.security.audit import (
    SecurityEvent,
    emit_security_event,
    set_security_event_sink,
)
from notelink.security.tokens import JWTProvider, JWTSigner

__all__ = [
    "JWTProvider",
    "JWTSigner",
    "SecurityEvent",
    "emit_security_event",
    "set_security_event_sink",
]

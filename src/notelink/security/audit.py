"""Authentication audit trail.

Every authentication failure becomes a ``SecurityEvent`` logged on
``notelink.auth``. Applications that want the events elsewhere (metrics,
a SIEM) install a sink with ``set_security_event_sink``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("notelink.auth")


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """What happened (``auth.token.missing``, ...), to which request, and when."""

    name: str
    method: str | None = None
    path: str | None = None
    client: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)
    occurred_at: float = field(default_factory=time.time)

    @classmethod
    def for_request(
        cls, name: str, request: Any | None, details: Mapping[str, Any] | None = None
    ) -> SecurityEvent:
        peer = getattr(request, "client", None)
        return cls(
            name=name,
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
            client=f"{peer[0]}:{peer[1]}" if peer else None,
            details=dict(details or {}),
        )


type SecurityEventSink = Callable[[SecurityEvent], None]

_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Forward every event to *sink* as well as the log. ``None`` stops forwarding."""
    global _sink
    _sink = sink


def emit_security_event(
    name: str,
    *,
    request: Any | None = None,
    details: Mapping[str, Any] | None = None,
) -> SecurityEvent:
    """Record a security event for *request* and return it."""
    event = SecurityEvent.for_request(name, request, details)
    logger.info(
        "%s %s %s client=%s",
        event.name,
        event.method or "-",
        event.path or "-",
        event.client or "-",
    )
    sink = _sink
    if sink is not None:
        sink(event)
    return event

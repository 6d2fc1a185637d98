"""Shared type aliases used across notelink modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Business handler supplied in a route descriptor; receives a RequestContext
Handler: TypeAlias = Callable[..., Any]

# Engine-level handler registered with the router (wrapped or raw)
EngineHandler: TypeAlias = Callable[..., Any]

# Fallback error responder; receives (request, EngineError | Exception)
ErrorResponder: TypeAlias = Callable[..., Any]

"""Routes — descriptors, their compilation, and handler wrapping."""

from notelink.routes.compiler import CompiledRouteSchema, compile_route
from notelink.routes.descriptor import HTTP_METHODS, RouteDescriptor, normalize_method
from notelink.routes.wrap import wrap_handler

__all__ = [
    "HTTP_METHODS",
    "CompiledRouteSchema",
    "RouteDescriptor",
    "compile_route",
    "normalize_method",
    "wrap_handler",
]

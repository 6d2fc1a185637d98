"""Request middleware.

The registry always installs ``JWTMiddleware`` (which makes the JWT
provider reachable from handlers), then ``CORSMiddleware`` unless CORS
is disabled, then whatever ``ApiConfig.middleware`` lists.
"""

from notelink.middleware.auth import JWTMiddleware, current_jwt
from notelink.middleware.builtin import CORSConfig, CORSMiddleware
from notelink.middleware.pipeline import MiddlewarePipeline, build_pipeline
from notelink.middleware.protocol import Middleware, Next

__all__ = [
    "CORSConfig",
    "CORSMiddleware",
    "JWTMiddleware",
    "Middleware",
    "MiddlewarePipeline",
    "Next",
    "build_pipeline",
    "current_jwt",
]

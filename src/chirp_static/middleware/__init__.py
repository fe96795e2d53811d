"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> AnyResponse

Built-in middleware:
    Mount -- Run a middleware under a path prefix
    ServeStatic -- Serve files from a directory
"""

from chirp_static.middleware.mount import Mount
from chirp_static.middleware.protocol import AnyResponse, Middleware, Next
from chirp_static.middleware.static import ServeStatic, serve_static

__all__ = [
    "AnyResponse",
    "Middleware",
    "Mount",
    "Next",
    "ServeStatic",
    "serve_static",
]

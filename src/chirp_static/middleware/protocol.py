"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> AnyResponse: ...

No base class required. The framework checks the shape, not the lineage.

Calling ``next`` continues the chain. Raising an ``HTTPError`` reports
a failure upward; the ASGI handler turns it into an error response.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from chirp_static.http.request import Request
from chirp_static.http.response import FileResponse, Response

# Any response type the pipeline can produce
AnyResponse: TypeAlias = Response | FileResponse

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for chirp-static middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> AnyResponse:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class ServeStatic:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...

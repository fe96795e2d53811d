"""Mount a middleware under a path prefix.

The wrapped middleware sees paths relative to the prefix; the prefix
moves to ``request.root_path`` so ``request.original_path`` still
reports what the client asked for. Requests outside the prefix skip
the wrapped middleware entirely.
"""

from chirp_static.http.request import Request
from chirp_static.middleware.protocol import AnyResponse, Middleware, Next


class Mount:
    """Run *middleware* only for paths under *prefix*.

    Usage::

        app.add_middleware(Mount("/static", ServeStatic("./static")))

    ``GET /static/app.js`` reaches ``ServeStatic`` as ``/app.js`` and
    ``GET /static`` as ``/``. ``GET /staticfoo`` does not match.
    """

    __slots__ = ("_prefix", "middleware")

    def __init__(self, prefix: str, middleware: Middleware) -> None:
        # Normalize: leading slash, no trailing slash; "/" mounts everything
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""
        self.middleware = middleware

    @property
    def prefix(self) -> str:
        return self._prefix or "/"

    def _matches(self, path: str) -> bool:
        if not self._prefix:
            return True
        return path == self._prefix or path.startswith(self._prefix + "/")

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        if not self._matches(request.path):
            return await next(request)

        mounted = request.mounted(self._prefix) if self._prefix else request

        async def resume(_: Request) -> AnyResponse:
            # Downstream handlers see the request as it arrived
            return await next(request)

        return await self.middleware(mounted, resume)

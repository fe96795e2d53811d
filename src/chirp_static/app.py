"""Host application for the static middleware.

Mutable during setup (routes, middleware, error handlers).
Frozen when ``__call__()`` is first invoked.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeAlias

from chirp_static._internal.asgi import Receive, Scope, Send
from chirp_static._internal.invoke import invoke
from chirp_static.config import AppConfig
from chirp_static.middleware.protocol import Middleware
from chirp_static.routing.router import Route, Router
from chirp_static.server.handler import handle_request

logger = logging.getLogger("chirp_static.server")

Handler: TypeAlias = Callable[..., Any]
ErrorHandler: TypeAlias = Callable[..., Any]


class App:
    """An ASGI application: a middleware chain in front of a route table.

    Usage::

        app = App()
        app.add_middleware(ServeStatic("./public"))

        @app.route("/health")
        def health(request):
            return "ok"

    Anything the middleware falls through on reaches the routes; a path
    with no route is a 404.

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock and a
        double check so exactly one thread compiles the app, even when
        several workers call ``__call__()`` on their first request.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[Route] = []
        self._middleware_list: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Exact URL path.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            allowed = frozenset(m.upper() for m in (methods or ["GET"]))
            self._pending_routes.append(Route(path, func, allowed))
            return func

        return decorator

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator."""

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline. First added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* during ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* during ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app before the first HTTP request, then runs the
        startup/shutdown hooks and reports back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for route in self._pending_routes:
            router.add(route)
        router.compile()

        self._router = router
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug(
            "app frozen: %d route(s), %d middleware",
            len(self._pending_routes),
            len(self._middleware),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and error handlers first."
            )
            raise RuntimeError(msg)

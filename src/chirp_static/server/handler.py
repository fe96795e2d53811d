"""ASGI handler — translates ASGI scope/messages to typed requests.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through middleware and routing,
and sends the response back through ASGI send().
"""

import inspect
from collections.abc import Callable
from typing import Any

from chirp_static._internal.asgi import Receive, Scope, Send
from chirp_static._internal.invoke import invoke
from chirp_static.errors import HTTPError
from chirp_static.http.request import Request
from chirp_static.http.response import FileResponse
from chirp_static.middleware.protocol import AnyResponse, Next
from chirp_static.routing.router import Router
from chirp_static.server.errors import handle_http_error, handle_internal_error, to_response
from chirp_static.server.sender import send_file_response, send_response


def build_pipeline(
    middleware: tuple[Callable[..., Any], ...],
    dispatch: Next,
) -> Next:
    """Wrap *middleware* around *dispatch*, first-registered outermost."""
    handler = dispatch
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> AnyResponse:
            return await _mw(req, _next)

        handler = make_next
    return handler


def _accepts_request(handler: Callable[..., Any]) -> bool:
    """Route handlers may take the request or nothing at all."""
    return bool(inspect.signature(handler).parameters)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    async def dispatch(req: Request) -> AnyResponse:
        route = router.match(req.method, req.path)
        args = (req,) if _accepts_request(route.handler) else ()
        return to_response(await invoke(route.handler, *args))

    handler = build_pipeline(middleware, dispatch)

    try:
        response = await handler(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    if isinstance(response, FileResponse):
        await send_file_response(response, send)
    else:
        await send_response(response, send, head=request.method == "HEAD")

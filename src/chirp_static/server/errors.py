"""Error handling pipeline for requests.

Maps HTTPError exceptions and unexpected failures to Response objects,
using registered error handlers or the built-in HTML error document.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from chirp_static.errors import HTTPError
from chirp_static.http.request import Request
from chirp_static.http.response import FileResponse, Response
from chirp_static.middleware.protocol import AnyResponse
from chirp_static.send import error_response

logger = logging.getLogger("chirp_static.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> AnyResponse:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    sig = inspect.signature(handler)
    params = list(sig.parameters.values())

    if len(params) >= 2:
        result = handler(request, exc)
    elif len(params) == 1:
        result = handler(request)
    else:
        result = handler()

    if inspect.isawaitable(result):
        result = await result

    return to_response(result)


def to_response(value: Any) -> AnyResponse:
    """Turn a handler's return value into a response.

    ``str`` becomes an HTML body, ``bytes`` an octet-stream body, and
    ``(body, status)`` sets the status as well.
    """
    match value:
        case Response() | FileResponse():
            return value
        case (body, int(status)):
            return to_response(body).with_status(status)
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case _:
            msg = f"Handler returned unsupported type {type(value).__name__}"
            raise TypeError(msg)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> AnyResponse:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    # Try exact exception type, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Keep the exception's status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    return error_response(exc, detail=exc.detail if debug else "")


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> AnyResponse:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(500) or error_handlers.get(type(exc))
    if handler is not None:
        return await call_error_handler(handler, request, exc)

    body = "Internal Server Error"
    if debug:
        body = f"{body}: {exc!r}"
    return Response(body=body, status=500, content_type="text/plain; charset=utf-8")

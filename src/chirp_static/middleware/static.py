"""Static file serving middleware.

Maps the request path to a file below a fixed root and answers with
the file (optionally a precompressed sibling), a directory redirect,
a 404, or by falling through to the next handler.

The file work itself (path safety, validators, conditional GET, the
open file) belongs to ``SendStream``. This middleware decides *which*
path to send, listens to the sender's events, and applies two policies
to them: what a directory means, and whether a failure is reported or
quietly handed to the next handler.
"""

import logging
import os
from typing import Any

from chirp_static.config import StaticConfig
from chirp_static.errors import HTTPError
from chirp_static.http.headers import MutableHeaders
from chirp_static.http.request import Request
from chirp_static.http.response import Response
from chirp_static.middleware.protocol import AnyResponse, Next
from chirp_static.send import SendOptions, SendStream, content_type
from chirp_static.serving.cache import DEFAULT_MAXSIZE, PathCache
from chirp_static.serving.directory import not_found_directory, redirect_directory
from chirp_static.serving.precompressed import Precompressed, negotiate

logger = logging.getLogger("chirp_static.static")

ALLOWED_METHODS = ("GET", "HEAD")


class ServeStatic:
    """Middleware that serves files from a root directory.

    Options (all keyword-only):

    ``fallthrough`` (default ``True``)
        Hand client errors (404, 403, bad methods) to the next handler
        instead of answering them. Server errors are always raised.
    ``redirect`` (default ``True``)
        Redirect ``/dir`` to ``/dir/``. When ``False`` directories 404.
    ``set_headers``
        ``set_headers(headers, path, stat)`` runs after the built-in
        headers are set and may override any of them.
    ``max_age`` / ``maxage`` (default ``0``)
        Cache-Control max-age in milliseconds, or a string like ``"1d"``.
    ``prefer_precompressed`` (default ``False``)
        Serve ``file.br`` / ``file.gz`` when they exist and the client
        accepts them.
    ``index``, ``dotfiles``, ``etag``, ``last_modified``,
    ``cache_control``, ``immutable``, ``extensions``
        Passed through to the file sender.

    Usage::

        app.add_middleware(ServeStatic("./public", max_age="1h"))

        # Mounted under a prefix, answering 404/405 itself
        app.add_middleware(Mount("/assets", ServeStatic(
            "./assets",
            fallthrough=False,
            prefer_precompressed=True,
        )))

    Raises:
        ConfigurationError: At construction, if ``root`` is missing or
            any option is invalid.
    """

    __slots__ = ("_cache", "_on_directory", "_send_options", "config")

    def __init__(self, root: str | os.PathLike[str], **options: Any) -> None:
        self.config = StaticConfig.build(root, **options)
        self._send_options = SendOptions.from_config(self.config)
        self._on_directory = redirect_directory if self.config.redirect else not_found_directory
        self._cache = PathCache(DEFAULT_MAXSIZE)

    def __repr__(self) -> str:
        return f"ServeStatic(root={self.config.root!r})"

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Serve a file, redirect, or fall through."""
        config = self.config

        if request.method not in ALLOWED_METHODS:
            if config.fallthrough:
                return await next(request)
            return (
                Response(body=b"", status=405, content_type=None)
                .with_header("Allow", ", ".join(ALLOWED_METHODS))
                .with_header("Content-Length", "0")
            )

        # Mount root without a slash: let the directory policy add it
        path = request.path
        if path == "/" and not request.original_path.endswith("/"):
            path = ""

        send_path = self._cache.resolve(path, config.root)

        variant: Precompressed | None = None
        if config.prefer_precompressed:
            variant = await negotiate(
                send_path,
                request.headers.get("accept-encoding"),
                config.root,
                index=config.index[0] if config.index else "index.html",
            )
            if variant is not None:
                send_path = variant.path

        stream = SendStream(request, send_path, self._send_options)
        forward_error = not config.fallthrough

        def on_headers(headers: MutableHeaders, file_path: str, stat: os.stat_result) -> None:
            headers["Vary"] = "Accept-Encoding"
            if variant is not None:
                # The sender described the .br/.gz file; describe the original
                headers["Content-Type"] = content_type(variant.original)
                headers["Content-Encoding"] = variant.encoding
                headers["Content-Length"] = stat.st_size
            if config.set_headers is not None:
                config.set_headers(headers, file_path, stat)

        def on_file(file_path: str, stat: os.stat_result) -> None:
            nonlocal forward_error
            forward_error = True

        async def on_error(exc: HTTPError) -> AnyResponse:
            if forward_error or not exc.status < 500:
                raise exc
            logger.debug("fall through %s %s (%d)", request.method, request.path, exc.status)
            return await next(request)

        stream.on("directory", self._on_directory)
        stream.on("headers", on_headers)
        if config.fallthrough:
            stream.on("file", on_file)
        stream.on("error", on_error)

        return await stream.pipe()


def serve_static(root: str | os.PathLike[str], **options: Any) -> ServeStatic:
    """Build a ``ServeStatic`` middleware. See its docstring for options."""
    return ServeStatic(root, **options)

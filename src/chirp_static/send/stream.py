"""File sender: resolve a path under a root and produce a file response.

``SendStream`` is a one-shot object per request. Callers subscribe to
its lifecycle events, then ``await stream.pipe()`` to get the response:

``directory`` (stream)
    The path is a directory. Listeners return the response to send,
    typically a redirect or ``await stream.error(404)``.
``file`` (path, stat)
    A regular file was found. Fires before any header work, so any
    ``error`` after it is a failure to serve an existing file.
``headers`` (headers, path, stat)
    Built-in headers are set; listeners may change ``headers`` in place.
``error`` (exc)
    An ``HTTPError`` describing the failure. Listeners return a response
    or raise. With no listener the sender answers with a small HTML page.

Listeners are detached when ``pipe()`` finishes, however it finishes.
"""

import errno
import logging
import os
import posixpath
import stat as stat_module
from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, TypeAlias

import anyio

from chirp_static._internal.html import (
    DOCUMENT_CONTENT_TYPE,
    DOCUMENT_HEADERS,
    escape_html,
    html_document,
)
from chirp_static._internal.invoke import invoke
from chirp_static.config import Dotfiles, StaticConfig
from chirp_static.errors import Forbidden, HTTPError, NotFound, PreconditionFailed, SendError
from chirp_static.http.headers import MutableHeaders
from chirp_static.http.request import Request
from chirp_static.http.response import FileResponse, Response
from chirp_static.send import conditional, mime

logger = logging.getLogger("chirp_static.send")

EVENTS = frozenset({"directory", "error", "file", "headers"})

Listener: TypeAlias = Callable[..., Any]

# errno values that mean "nothing servable here" rather than an I/O failure
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG})


@dataclass(frozen=True, slots=True, kw_only=True)
class SendOptions:
    """How the sender resolves and describes files.

    ``root`` of ``None`` means ``path`` is used as an absolute
    filesystem path with no containment check.
    """

    root: str | None = None
    index: tuple[str, ...] = ("index.html",)
    dotfiles: Dotfiles = "ignore"
    etag: bool = True
    last_modified: bool = True
    cache_control: bool = True
    immutable: bool = False
    max_age: int = 0
    extensions: tuple[str, ...] = ()
    chunk_size: int = 64 * 1024

    @classmethod
    def from_config(cls, config: StaticConfig) -> "SendOptions":
        return cls(
            root=config.root,
            index=config.index,
            dotfiles=config.dotfiles,
            etag=config.etag,
            last_modified=config.last_modified,
            cache_control=config.cache_control,
            immutable=config.immutable,
            max_age=config.max_age,
            extensions=config.extensions,
        )


def make_error(status: int, detail: str = "") -> HTTPError:
    """Build the ``HTTPError`` subclass matching *status*."""
    if status == 404:
        return NotFound(detail or "Not Found")
    if status == 403:
        return Forbidden(detail or "Forbidden")
    if status == 412:
        return PreconditionFailed(detail or "Precondition Failed")
    return SendError(status, detail)


def error_response(exc: HTTPError, *, detail: str = "") -> Response:
    """The sender's own error page for *exc*.

    The page shows the status phrase, or *detail* when given.
    """
    body = html_document("Error", escape_html(detail or _phrase(exc.status)))
    response = Response(body=body, status=exc.status, content_type=DOCUMENT_CONTENT_TYPE)
    for name, value in (*exc.headers, *DOCUMENT_HEADERS):
        response = response.with_header(name, value)
    return response


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return str(status)


def _has_dotfile(parts: list[str]) -> bool:
    return any(len(part) > 1 and part.startswith(".") for part in parts)


class SendStream:
    """Serve one request path from the filesystem.

    Usage::

        stream = SendStream(request, "/app.js", SendOptions(root="/var/www"))
        stream.on("headers", lambda headers, path, stat: headers.update({"X-A": "1"}))
        response = await stream.pipe()
    """

    __slots__ = ("_listeners", "_piped", "options", "path", "request")

    def __init__(self, request: Request, path: str, options: SendOptions | None = None) -> None:
        self.request = request
        self.path = path
        self.options = options or SendOptions()
        self._listeners: dict[str, list[Listener]] = {event: [] for event in EVENTS}
        self._piped = False

    # -- Listener registration --

    def on(self, event: str, listener: Listener) -> "SendStream":
        """Subscribe *listener* to *event*. Returns the stream for chaining."""
        if event not in EVENTS:
            msg = f"Unknown event {event!r}; expected one of {sorted(EVENTS)}"
            raise ValueError(msg)
        self._listeners[event].append(listener)
        return self

    def off(self, event: str, listener: Listener) -> None:
        """Unsubscribe *listener* from *event* if it is subscribed."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def remove_all_listeners(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()

    async def _emit(self, event: str, *args: Any) -> Any:
        """Call every listener of *event* in order; return the last result."""
        result = None
        for listener in list(self._listeners[event]):
            result = await invoke(listener, *args)
        return result

    # -- Queries used by listeners --

    def has_trailing_slash(self) -> bool:
        return self.path.endswith("/")

    async def error(
        self,
        status: int,
        detail: str = "",
        *,
        cause: BaseException | None = None,
    ) -> Response | FileResponse:
        """Report a failure with *status* through the ``error`` event."""
        exc = make_error(status, detail)
        if cause is not None:
            object.__setattr__(exc, "__cause__", cause)
        logger.debug("send %d %s (%s)", status, self.path, detail or _phrase(status))

        if not self._listeners["error"]:
            return error_response(exc)
        result = await self._emit("error", exc)
        return result if result is not None else error_response(exc)

    # -- Pipeline --

    async def pipe(self) -> Response | FileResponse:
        """Resolve the path and return the response. Callable once."""
        if self._piped:
            msg = "SendStream.pipe() may only be called once"
            raise RuntimeError(msg)
        self._piped = True
        try:
            return await self._resolve()
        finally:
            self.remove_all_listeners()

    async def _resolve(self) -> Response | FileResponse:
        path = self.path
        if "\0" in path:
            return await self.error(400, "Path contains a NUL byte")

        root = self.options.root
        if root is not None:
            relative = posixpath.normpath("./" + path) if path else "."
            if relative == ".." or relative.startswith("../"):
                return await self.error(403, "Path escapes the root directory")
            parts = relative.split("/")
            filename = posixpath.normpath(posixpath.join(root, relative))
        else:
            if ".." in path.split("/"):
                return await self.error(403, "Path contains '..'")
            filename = posixpath.normpath(path)
            parts = filename.split("/")

        if _has_dotfile(parts):
            if self.options.dotfiles == "deny":
                return await self.error(403, "Dotfile access denied")
            if self.options.dotfiles == "ignore":
                return await self.error(404)

        if self.options.index and self.has_trailing_slash():
            return await self._send_index(filename)
        return await self._send_file(filename)

    async def _stat(self, filename: str) -> os.stat_result:
        return await anyio.Path(filename).stat()

    async def _stat_error(self, exc: OSError) -> Response | FileResponse:
        if exc.errno in _MISSING_ERRNOS:
            return await self.error(404, cause=exc)
        return await self.error(500, exc.strerror or "", cause=exc)

    async def _send_file(self, filename: str) -> Response | FileResponse:
        try:
            st = await self._stat(filename)
        except OSError as exc:
            has_extension = bool(posixpath.splitext(filename)[1])
            if (
                exc.errno == errno.ENOENT
                and self.options.extensions
                and not has_extension
                and not self.has_trailing_slash()
            ):
                return await self._send_with_extensions(filename, exc)
            return await self._stat_error(exc)

        if stat_module.S_ISDIR(st.st_mode):
            return await self._on_directory()
        await self._emit("file", filename, st)
        return await self._send(filename, st)

    async def _send_with_extensions(
        self,
        filename: str,
        original: OSError,
    ) -> Response | FileResponse:
        for extension in self.options.extensions:
            candidate = f"{filename}.{extension}"
            try:
                st = await self._stat(candidate)
            except OSError:
                continue
            if stat_module.S_ISDIR(st.st_mode):
                continue
            await self._emit("file", candidate, st)
            return await self._send(candidate, st)
        return await self._stat_error(original)

    async def _send_index(self, directory: str) -> Response | FileResponse:
        for name in self.options.index:
            candidate = posixpath.join(directory, name)
            try:
                st = await self._stat(candidate)
            except OSError:
                continue
            if stat_module.S_ISDIR(st.st_mode):
                continue
            await self._emit("file", candidate, st)
            return await self._send(candidate, st)
        return await self.error(404)

    async def _on_directory(self) -> Response | FileResponse:
        if not self._listeners["directory"]:
            return await self.error(404)
        return await self._emit("directory", self)

    def _build_headers(self, filename: str, st: os.stat_result) -> MutableHeaders:
        options = self.options
        headers = MutableHeaders()
        if options.cache_control:
            cache_control = f"public, max-age={options.max_age // 1000}"
            if options.immutable:
                cache_control += ", immutable"
            headers["Cache-Control"] = cache_control
        if options.last_modified:
            headers["Last-Modified"] = conditional.http_date(st.st_mtime)
        if options.etag:
            headers["ETag"] = conditional.stat_etag(st)
        headers["Content-Type"] = mime.content_type(filename)
        headers["Content-Length"] = st.st_size
        return headers

    async def _send(self, filename: str, st: os.stat_result) -> Response | FileResponse:
        headers = self._build_headers(filename, st)
        await self._emit("headers", headers, filename, st)

        request_headers = self.request.headers
        if conditional.is_conditional(request_headers):
            if conditional.is_precondition_failure(request_headers, headers):
                return await self.error(412)
            if conditional.is_fresh(request_headers, headers):
                headers.remove_content_headers()
                return FileResponse(path=filename, status=304, headers=headers.to_tuple())

        if self.request.method == "HEAD":
            return FileResponse(path=filename, headers=headers.to_tuple())

        try:
            handle = await anyio.open_file(filename, "rb")
        except OSError as exc:
            return await self.error(500, exc.strerror or "", cause=exc)
        return FileResponse(
            path=filename,
            file=handle,
            headers=headers.to_tuple(),
            chunk_size=self.options.chunk_size,
        )

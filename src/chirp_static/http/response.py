"""HTTP responses with a chainable ``.with_*()`` transformation API.

Each transformation returns a new response. Immutable by convention,
built incrementally by design.

``Response`` carries its whole body in memory. ``FileResponse`` carries
an already-opened file that the sender streams and then closes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.

    The sender adds ``Content-Length`` from the body unless a header of
    that name is already present. A ``content_type`` of ``None`` sends
    no ``Content-Type`` at all.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str | None) -> "Response":
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """Return the first header value named *name* (case-insensitive)."""
        return _find_header(self.headers, name)

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class FileResponse:
    """A response whose body is streamed from an open file.

    ``file`` is an ``anyio.AsyncFile`` opened by the file sender, or
    ``None`` when no body is sent (``HEAD``, 304). Every header,
    ``Content-Type`` and ``Content-Length`` included, lives in
    ``headers`` exactly as the sender decided them.

    Supports the same ``.with_*()`` chainable API as ``Response`` so
    middleware can modify headers/status without knowing the body is
    a file.
    """

    path: str
    file: Any = None
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    chunk_size: int = 64 * 1024

    def with_status(self, status: int) -> "FileResponse":
        """Return a new FileResponse with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "FileResponse":
        """Return a new FileResponse with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "FileResponse":
        """Return a new FileResponse with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def header(self, name: str) -> str | None:
        """Return the first header value named *name* (case-insensitive)."""
        return _find_header(self.headers, name)

    @property
    def content_type(self) -> str:
        return self.header("Content-Type") or "application/octet-stream"


def _find_header(headers: tuple[tuple[str, str], ...], name: str) -> str | None:
    lower = name.lower()
    for key, value in headers:
        if key.lower() == lower:
            return value
    return None

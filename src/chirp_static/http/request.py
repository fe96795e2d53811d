"""Immutable HTTP request.

Frozen metadata taken from the ASGI scope. Static serving never reads a
request body, so the request carries none of the body helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from chirp_static.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the effective, already percent-decoded path the current
    middleware sees. ``root_path`` is whatever prefix a ``Mount`` (or the
    ASGI server) stripped off before it; ``raw_path`` is the path exactly
    as it arrived on the wire, when the server provides it.
    """

    method: str
    path: str
    headers: Headers
    query_string: str = ""
    root_path: str = ""
    raw_path: str | None = None
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    @property
    def original_path(self) -> str:
        """Path as the client requested it, before any mount stripping."""
        if self.raw_path is not None:
            return self.raw_path
        return self.root_path + self.path

    @property
    def url(self) -> str:
        """Effective path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def original_url(self) -> str:
        """Original path plus query string."""
        if self.query_string:
            return f"{self.original_path}?{self.query_string}"
        return self.original_path

    def mounted(self, prefix: str) -> Request:
        """Return a copy with *prefix* moved from ``path`` to ``root_path``."""
        return replace(
            self,
            path=self.path[len(prefix) :] or "/",
            root_path=self.root_path + prefix,
        )

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI scope."""
        server = scope.get("server")
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            root_path=scope.get("root_path", ""),
            raw_path=raw_path.decode("latin-1") if raw_path else None,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )

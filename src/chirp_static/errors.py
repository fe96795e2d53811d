"""chirp-static exception hierarchy.

Shared across the app, the middleware chain, and the file sender so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class StaticError(Exception):
    """Base for all chirp-static errors."""


class ConfigurationError(StaticError):
    """Raised when configuration is invalid.

    Always raised at construction time, never while serving a request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(StaticError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or the file sender. The ASGI
    handler catches these and dispatches to the matching ``@app.error()``
    handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    @property
    def is_client_error(self) -> bool:
        """True for 4xx statuses."""
        return 400 <= self.status < 500


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — nothing matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Forbidden(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """403 — the path exists or may exist but must not be served."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class PreconditionFailed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """412 — an ``If-Match`` or ``If-Unmodified-Since`` check failed."""

    def __init__(self, detail: str = "Precondition Failed") -> None:
        super().__init__(status=412, detail=detail)


class SendError(HTTPError):
    """Any other status the file sender reports, usually 400 or 500.

    When the failure comes from the filesystem, the ``OSError`` is
    chained as ``__cause__``.
    """

    def __init__(self, status: int = 500, detail: str = "") -> None:
        super().__init__(status=status, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )

"""Exact-path router for the handlers behind the middleware chain.

Routes are registered during setup and frozen when the app freezes.
Static serving is the point of this package, so routes match whole
paths only; there are no path parameters.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from chirp_static.errors import MethodNotAllowed, NotFound


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition."""

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]


def normalize_path(path: str) -> str:
    """``/a/b/`` and ``a/b`` both become ``/a/b``; the root stays ``/``."""
    return "/" + path.strip("/")


class Router:
    """Map ``(method, path)`` to a route.

    Usage::

        router = Router()
        router.add(Route("/health", handler, frozenset({"GET"})))
        router.compile()
        route = router.match("GET", "/health")

    A route registered for ``GET`` also answers ``HEAD``.
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, dict[str, Route]] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        by_method = self._routes.setdefault(normalize_path(route.path), {})
        for method in route.methods:
            by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order, without duplicates."""
        seen: set[int] = set()
        result: list[Route] = []
        for by_method in self._routes.values():
            for route in by_method.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> Route:
        """Return the route for *method* and *path*.

        Raises ``NotFound`` if no route has this path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        by_method = self._routes.get(normalize_path(path))
        if not by_method:
            raise NotFound(f"No route matches {method} {path!r}")

        if method in by_method:
            return by_method[method]
        if method == "HEAD" and "GET" in by_method:
            return by_method["GET"]

        raise MethodNotAllowed(frozenset(by_method))

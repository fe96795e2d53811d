"""Tests for chirp_static.routing.router — exact-path router."""

import pytest

from chirp_static.errors import MethodNotAllowed, NotFound
from chirp_static.routing.router import Route, Router, normalize_path


def _handler() -> str:
    return "ok"


def _route(path: str, methods: frozenset[str] | None = None) -> Route:
    return Route(path=path, handler=_handler, methods=methods or frozenset({"GET"}))


class TestNormalizePath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [("/", "/"), ("", "/"), ("/a/b/", "/a/b"), ("a/b", "/a/b")],
    )
    def test_normalize(self, path, expected) -> None:
        assert normalize_path(path) == expected


class TestRouterMatch:
    def test_root(self) -> None:
        router = Router()
        router.add(_route("/"))
        router.compile()
        assert router.match("GET", "/").path == "/"

    def test_trailing_slash_insensitive(self) -> None:
        router = Router()
        router.add(_route("/health"))
        router.compile()
        assert router.match("GET", "/health/").path == "/health"

    def test_not_found(self) -> None:
        router = Router()
        router.add(_route("/health"))
        router.compile()
        with pytest.raises(NotFound):
            router.match("GET", "/missing")

    def test_method_not_allowed(self) -> None:
        router = Router()
        router.add(_route("/items", frozenset({"GET", "POST"})))
        router.compile()
        with pytest.raises(MethodNotAllowed) as exc_info:
            router.match("DELETE", "/items")
        assert exc_info.value.headers == (("Allow", "GET, POST"),)

    def test_head_uses_get_route(self) -> None:
        router = Router()
        route = _route("/page")
        router.add(route)
        router.compile()
        assert router.match("HEAD", "/page") is route

    def test_routes_listed_once(self) -> None:
        router = Router()
        route = _route("/items", frozenset({"GET", "POST"}))
        router.add(route)
        assert router.routes == [route]

    def test_add_after_compile_rejected(self) -> None:
        router = Router()
        router.compile()
        with pytest.raises(RuntimeError, match="after compilation"):
            router.add(_route("/late"))

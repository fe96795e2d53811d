"""Tests for chirp_static.middleware.mount — prefix mounting."""

import pytest

from chirp_static.http.headers import Headers
from chirp_static.http.request import Request
from chirp_static.http.response import Response
from chirp_static.middleware.mount import Mount
from chirp_static.middleware.protocol import AnyResponse, Next

pytestmark = pytest.mark.anyio


def _request(path: str) -> Request:
    return Request(method="GET", path=path, headers=Headers(), raw_path=path)


class _Recorder:
    def __init__(self, *, forward: bool = False) -> None:
        self.seen: list[Request] = []
        self.forward = forward

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        self.seen.append(request)
        if self.forward:
            return await next(request)
        return Response("inner")


class TestMountPrefix:
    def test_prefix_normalized(self) -> None:
        assert Mount("static/", _Recorder()).prefix == "/static"
        assert Mount("/", _Recorder()).prefix == "/"

    async def test_strips_prefix(self) -> None:
        inner = _Recorder()
        mount = Mount("/static", inner)

        async def next_handler(request: Request) -> AnyResponse:
            return Response("outer")

        response = await mount(_request("/static/app.js"), next_handler)
        assert response.text == "inner"
        seen = inner.seen[0]
        assert seen.path == "/app.js"
        assert seen.root_path == "/static"
        assert seen.original_path == "/static/app.js"

    async def test_prefix_itself_becomes_root(self) -> None:
        inner = _Recorder()
        await Mount("/static", inner)(_request("/static"), _unreachable)
        assert inner.seen[0].path == "/"
        assert inner.seen[0].original_path == "/static"

    async def test_similar_prefix_does_not_match(self) -> None:
        inner = _Recorder()

        async def next_handler(request: Request) -> AnyResponse:
            return Response("outer")

        response = await Mount("/static", inner)(_request("/staticfoo"), next_handler)
        assert response.text == "outer"
        assert inner.seen == []

    async def test_next_receives_original_request(self) -> None:
        inner = _Recorder(forward=True)
        received: list[Request] = []

        async def next_handler(request: Request) -> AnyResponse:
            received.append(request)
            return Response("outer")

        await Mount("/static", inner)(_request("/static/x"), next_handler)
        assert received[0].path == "/static/x"
        assert received[0].root_path == ""

    async def test_root_mount_passes_request_through(self) -> None:
        inner = _Recorder()
        request = _request("/a")
        await Mount("/", inner)(request, _unreachable)
        assert inner.seen[0] is request


async def _unreachable(request: Request) -> AnyResponse:
    raise AssertionError("next should not be called")

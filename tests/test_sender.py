"""Tests for chirp_static.server.sender response emission rules."""

import anyio
import pytest

from chirp_static.http.response import FileResponse, Response
from chirp_static.server.sender import send_file_response, send_response

pytestmark = pytest.mark.anyio


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def __call__(self, message: dict) -> None:
        self.messages.append(message)

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.messages[0]["headers"])

    @property
    def body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages[1:])


class TestSendResponseNoBodyStatuses:
    async def test_204_drops_body_and_sets_zero_content_length(self) -> None:
        send = _Recorder()
        await send_response(Response("unexpected-body").with_status(204), send)

        assert send.messages[0]["type"] == "http.response.start"
        assert send.headers[b"content-length"] == b"0"
        assert send.messages[1]["body"] == b""

    async def test_304_drops_body(self) -> None:
        send = _Recorder()
        await send_response(Response("unexpected-body").with_status(304), send)
        assert send.headers[b"content-length"] == b"0"
        assert send.body == b""

    async def test_200_preserves_body(self) -> None:
        send = _Recorder()
        await send_response(Response("ok"), send)
        assert send.headers[b"content-length"] == b"2"
        assert send.body == b"ok"


class TestSendResponseHeaders:
    async def test_no_content_type_when_none(self) -> None:
        send = _Recorder()
        await send_response(Response(b"", status=405, content_type=None), send)
        assert b"content-type" not in send.headers

    async def test_explicit_content_length_kept(self) -> None:
        send = _Recorder()
        response = Response(b"", status=405, content_type=None).with_header("Content-Length", "0")
        await send_response(response, send)
        lengths = [v for k, v in send.messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"0"]

    async def test_head_keeps_length_drops_body(self) -> None:
        send = _Recorder()
        await send_response(Response("hello"), send, head=True)
        assert send.headers[b"content-length"] == b"5"
        assert send.body == b""

    async def test_header_names_lowercased(self) -> None:
        send = _Recorder()
        await send_response(Response("x").with_header("X-Custom", "v"), send)
        assert send.headers[b"x-custom"] == b"v"


class TestSendFileResponse:
    async def test_streams_in_chunks(self, tmp_path) -> None:
        path = tmp_path / "data.bin"
        path.write_bytes(b"abcdefghij")
        file = await anyio.open_file(path, "rb")
        response = FileResponse(
            path=str(path),
            file=file,
            headers=(("Content-Length", "10"),),
            chunk_size=4,
        )

        send = _Recorder()
        await send_file_response(response, send)

        bodies = [m["body"] for m in send.messages[1:]]
        assert bodies == [b"abcd", b"efgh", b"ij", b""]
        assert send.messages[-1]["more_body"] is False
        assert send.headers[b"content-length"] == b"10"

    async def test_closes_file(self, tmp_path) -> None:
        path = tmp_path / "data.bin"
        path.write_bytes(b"x")
        file = await anyio.open_file(path, "rb")

        await send_file_response(FileResponse(path=str(path), file=file), _Recorder())
        assert file.wrapped.closed

    async def test_closes_file_when_send_fails(self, tmp_path) -> None:
        path = tmp_path / "data.bin"
        path.write_bytes(b"x")
        file = await anyio.open_file(path, "rb")

        async def disconnected(message: dict) -> None:
            raise OSError("client went away")

        with pytest.raises(OSError, match="client went away"):
            await send_file_response(FileResponse(path=str(path), file=file), disconnected)
        assert file.wrapped.closed

    async def test_headers_only_without_file(self) -> None:
        send = _Recorder()
        response = FileResponse(path="/x", status=304, headers=(("ETag", 'W/"1-2"'),))
        await send_file_response(response, send)
        assert send.messages[0]["status"] == 304
        assert send.headers[b"etag"] == b'W/"1-2"'
        assert send.body == b""

"""ASGI response sending — translates Response types to ASGI messages.

Handles in-memory responses and file responses streamed in chunks.
"""

import logging

from chirp_static._internal.asgi import Send
from chirp_static.http.response import FileResponse, Response

logger = logging.getLogger("chirp_static.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI send() calls.

    ``Content-Length`` is computed from the body unless the response
    already carries one. ``HEAD`` keeps the headers and drops the body.
    """
    raw_headers: list[tuple[bytes, bytes]] = []
    if response.content_type is not None:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    raw_headers.extend(_encode_headers(response.headers))

    body = response.body_bytes if _body_allowed(response.status) else b""

    if response.header("Content-Length") is None:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


async def send_file_response(response: FileResponse, send: Send) -> None:
    """Stream a FileResponse, then close its file.

    Headers go out exactly as the file sender set them. The file is
    read ``chunk_size`` bytes at a time, each chunk sent with
    ``more_body=True``, and the stream closes with an empty body.
    """
    file = response.file
    try:
        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": _encode_headers(response.headers),
            }
        )
        if file is not None and _body_allowed(response.status):
            while chunk := await file.read(response.chunk_size):
                await send(
                    {
                        "type": "http.response.body",
                        "body": chunk,
                        "more_body": True,
                    }
                )
        await send(
            {
                "type": "http.response.body",
                "body": b"",
                "more_body": False,
            }
        )
    except OSError as exc:
        # Headers are already out; all that is left is to stop sending
        logger.warning("file stream aborted: %s (%s)", response.path, exc)
        raise
    finally:
        if file is not None:
            await file.aclose()

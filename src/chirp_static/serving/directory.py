"""What to do when a request resolves to a directory.

Two interchangeable ``directory`` listeners for ``SendStream``; the
middleware picks one at construction time:

- ``redirect_directory`` answers 301 to the same URL with a trailing
  slash, so relative links inside the directory's index resolve.
- ``not_found_directory`` hands a 404 back to the sender's error path.
"""

import re
from urllib.parse import quote

from chirp_static._internal.html import (
    DOCUMENT_CONTENT_TYPE,
    DOCUMENT_HEADERS,
    escape_html,
    html_document,
)
from chirp_static.http.response import FileResponse, Response
from chirp_static.send import SendStream

# Characters legal in a URL that encode_url leaves alone, "%" included
_URL_SAFE = "!#$%&'()*+,/:;=?@[\\]^_|~-."

# A "%" that does not start a valid %XX escape
_STRAY_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def collapse_leading_slashes(path: str) -> str:
    """``//evil.example/`` -> ``/evil.example/``.

    A Location starting with ``//`` would be read as protocol-relative
    and send the client to another host.
    """
    stripped = path.lstrip("/")
    if len(path) - len(stripped) > 1:
        return "/" + stripped
    return path


def encode_url(url: str) -> str:
    """Percent-encode what may not appear in a URL.

    Existing ``%XX`` escapes are kept as they are; any other ``%`` is
    encoded as ``%25``. Non-ASCII characters are UTF-8 encoded.
    """
    return quote(_STRAY_PERCENT_RE.sub("%25", url), safe=_URL_SAFE)


def redirect_location(original_path: str, query_string: str = "") -> str:
    """Location for the trailing-slash redirect of *original_path*."""
    location = collapse_leading_slashes(original_path + "/")
    if query_string:
        location = f"{location}?{query_string}"
    return encode_url(location)


def redirect_response(location: str) -> Response:
    """A 301 to *location* with a tiny HTML body naming it."""
    body = html_document("Redirecting", f"Redirecting to {escape_html(location)}")
    response = Response(body=body, status=301, content_type=DOCUMENT_CONTENT_TYPE)
    response = response.with_header("Content-Length", str(len(response.body_bytes)))
    for name, value in DOCUMENT_HEADERS:
        response = response.with_header(name, value)
    return response.with_header("Location", location)


async def redirect_directory(stream: SendStream) -> Response | FileResponse:
    """Redirect to the slash-terminated URL, or 404 if it already has one.

    A directory reached through a URL that already ends in ``/`` had no
    index to serve; redirecting again would loop.
    """
    if stream.has_trailing_slash():
        return await stream.error(404)

    request = stream.request
    location = redirect_location(request.original_path, request.query_string)
    return redirect_response(location)


async def not_found_directory(stream: SendStream) -> Response | FileResponse:
    """Treat every directory as missing."""
    return await stream.error(404)

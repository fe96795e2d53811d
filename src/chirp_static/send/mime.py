"""Content-Type lookup for served files."""

import mimetypes

DEFAULT_TYPE = "application/octet-stream"

# Types outside text/* that are still text and get a charset
_TEXT_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/manifest+json",
        "application/xml",
        "image/svg+xml",
    }
)

# mimetypes reports "x.tar.gz" as a gzip-encoded tar; the file itself is gzip
_ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
}


def lookup(path: str) -> str | None:
    """Bare MIME type of the file at *path*, or ``None`` when unknown."""
    mime, encoding = mimetypes.guess_type(path, strict=False)
    if encoding is not None:
        return _ENCODING_TYPES.get(encoding)
    return mime


def content_type(path: str) -> str:
    """Content-Type header value for *path*, with a charset for text."""
    mime = lookup(path)
    if mime is None:
        return DEFAULT_TYPE
    if mime.startswith("text/") or mime in _TEXT_TYPES:
        return f"{mime}; charset=UTF-8"
    return mime

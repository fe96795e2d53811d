"""Precompressed variant negotiation.

Given the path a request would serve and the client's Accept-Encoding,
decide whether a prebuilt ``.br`` or ``.gz`` sibling should be served
instead. Brotli always wins over gzip when both are acceptable and both
siblings exist.

The existence checks run through ``anyio.Path`` so they happen on a
worker thread and never stall other requests on the event loop. A
sibling can still disappear between this check and the sender opening
it; the sender then reports an ordinary 404 for that request.
"""

import logging
import posixpath
from dataclasses import dataclass

import anyio

logger = logging.getLogger("chirp_static.precompressed")

# (Accept-Encoding coding, file suffix, Content-Encoding value), in priority order
ENCODINGS: tuple[tuple[str, str, str], ...] = (
    ("br", ".br", "br"),
    ("gzip", ".gz", "gzip"),
)


@dataclass(frozen=True, slots=True)
class Precompressed:
    """A negotiated variant.

    ``path`` is the request path of the sibling (``/app.js.br``),
    ``original`` the path it stands in for (``/app.js``).
    """

    path: str
    encoding: str
    original: str


def parse_accept_encoding(header: str | None) -> frozenset[str]:
    """Return the codings a client accepts, lowercased.

    Parameters are dropped; a coding listed with ``q=0`` is refused
    and left out.
    """
    if not header:
        return frozenset()
    accepted: set[str] = set()
    for part in header.split(","):
        coding, _, params = part.partition(";")
        coding = coding.strip().lower()
        if not coding:
            continue
        if _refused(params):
            continue
        accepted.add(coding)
    return frozenset(accepted)


def _refused(params: str) -> bool:
    for param in params.split(";"):
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value.strip()) == 0
            except ValueError:
                return False
    return False


async def negotiate(
    candidate: str,
    accept_encoding: str | None,
    root: str,
    *,
    index: str = "index.html",
) -> Precompressed | None:
    """Pick a precompressed sibling of *candidate*, or ``None``.

    An empty or ``/`` candidate stands for the directory index, so the
    lookup is done for ``/<index>``. At most one existence check per
    acceptable encoding is made.
    """
    accepted = parse_accept_encoding(accept_encoding)
    if not accepted:
        return None

    if candidate in ("", "/"):
        candidate = "/" + index

    # Leave unsafe paths for the sender to reject
    if "\0" in candidate or ".." in candidate.split("/"):
        return None

    absolute = posixpath.join(root, candidate.lstrip("/"))
    for coding, suffix, content_encoding in ENCODINGS:
        if coding not in accepted:
            continue
        if await _is_file(absolute + suffix):
            return Precompressed(
                path=candidate + suffix,
                encoding=content_encoding,
                original=candidate,
            )
    return None


async def _is_file(path: str) -> bool:
    """Like ``Path.is_file()``, but any ``OSError`` is a miss."""
    try:
        return await anyio.Path(path).is_file()
    except OSError as exc:
        logger.debug("precompressed check failed for %s: %s", path, exc)
        return False

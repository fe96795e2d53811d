"""Validators and conditional-request evaluation (RFC 9110 §13).

Pure functions over request headers and the response headers the
sender has built, so they are easy to test in isolation.
"""

import os
import re
from collections.abc import Mapping
from email.utils import formatdate, parsedate_to_datetime

_NO_CACHE_RE = re.compile(r"(?:^|,)\s*no-cache\s*(?:,|$)", re.IGNORECASE)

_CONDITIONAL_HEADERS = ("if-match", "if-unmodified-since", "if-none-match", "if-modified-since")


def stat_etag(stat: os.stat_result) -> str:
    """Weak validator from size and mtime: ``W/"<size>-<mtime ms>"`` in hex."""
    mtime_ms = stat.st_mtime_ns // 1_000_000
    return f'W/"{stat.st_size:x}-{mtime_ms:x}"'


def http_date(timestamp: float) -> str:
    """IMF-fixdate for a POSIX timestamp."""
    return formatdate(timestamp, usegmt=True)


def parse_http_date(value: str | None) -> float | None:
    """POSIX timestamp of an HTTP date, or ``None`` if absent or invalid."""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError, IndexError):
        return None


def parse_token_list(value: str) -> list[str]:
    """Split a comma-separated header into its non-empty tokens."""
    return [token.strip() for token in value.split(",") if token.strip()]


def _etag_matches(candidate: str, etag: str) -> bool:
    return candidate == etag or candidate == f"W/{etag}" or f"W/{candidate}" == etag


def is_conditional(request_headers: Mapping[str, str]) -> bool:
    return any(name in request_headers for name in _CONDITIONAL_HEADERS)


def is_precondition_failure(
    request_headers: Mapping[str, str],
    response_headers: Mapping[str, str],
) -> bool:
    """True when ``If-Match`` or ``If-Unmodified-Since`` rejects the file."""
    match = request_headers.get("if-match")
    if match:
        etag = response_headers.get("ETag")
        if not etag:
            return True
        if match.strip() == "*":
            return False
        return not any(_etag_matches(token, etag) for token in parse_token_list(match))

    unmodified_since = parse_http_date(request_headers.get("if-unmodified-since"))
    if unmodified_since is not None:
        last_modified = parse_http_date(response_headers.get("Last-Modified"))
        return last_modified is None or last_modified > unmodified_since

    return False


def is_fresh(
    request_headers: Mapping[str, str],
    response_headers: Mapping[str, str],
) -> bool:
    """True when the client's cached copy is still valid (answer 304).

    ``If-None-Match`` takes precedence: when present and not ``*`` it
    must match the current ETag. ``If-Modified-Since`` must then not be
    older than ``Last-Modified``. A ``Cache-Control: no-cache`` request
    is never fresh.
    """
    modified_since = request_headers.get("if-modified-since")
    none_match = request_headers.get("if-none-match")
    if not modified_since and not none_match:
        return False

    cache_control = request_headers.get("cache-control")
    if cache_control and _NO_CACHE_RE.search(cache_control):
        return False

    if none_match and none_match.strip() != "*":
        etag = response_headers.get("ETag")
        if not etag:
            return False
        if not any(_etag_matches(token, etag) for token in parse_token_list(none_match)):
            return False

    if modified_since:
        last_modified = parse_http_date(response_headers.get("Last-Modified"))
        since = parse_http_date(modified_since)
        if last_modified is None or since is None or last_modified > since:
            return False

    return True

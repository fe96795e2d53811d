"""File sender — the streaming engine the static middleware delegates to.

Owns path safety, conditional GET, validators, MIME types, and the
opened file handle. The middleware only listens to its events and
adjusts the headers it emits.
"""

from chirp_static.send.mime import content_type, lookup
from chirp_static.send.stream import EVENTS, SendOptions, SendStream, error_response

__all__ = [
    "EVENTS",
    "SendOptions",
    "SendStream",
    "content_type",
    "error_response",
    "lookup",
]

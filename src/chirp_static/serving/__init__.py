"""Request resolution pieces used by the static middleware."""

from chirp_static.serving.cache import PathCache
from chirp_static.serving.directory import not_found_directory, redirect_directory
from chirp_static.serving.precompressed import Precompressed, negotiate

__all__ = [
    "PathCache",
    "Precompressed",
    "negotiate",
    "not_found_directory",
    "redirect_directory",
]

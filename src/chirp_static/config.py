"""Configuration records.

Frozen dataclasses — immutable after creation, IDE-autocompletable,
no string-key dict lookups. ``StaticConfig`` validates itself in
``__post_init__`` so a bad option fails when the middleware is built,
never while a request is being served.
"""

import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, TypeAlias

from chirp_static.errors import ConfigurationError
from chirp_static.http.headers import MutableHeaders

Dotfiles: TypeAlias = Literal["allow", "deny", "ignore"]

# Called as set_headers(headers, path, stat) after the built-in headers are set
SetHeaders: TypeAlias = Callable[[MutableHeaders, str, os.stat_result], None]

_DURATION_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(ms|s|m|h|d|w|y)?\s*$", re.IGNORECASE)

_UNIT_MS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
    "y": int(365.25 * 24 * 60 * 60 * 1000),
}

# One year, the ceiling browsers honour for max-age
MAX_MAX_AGE_MS = 365 * 24 * 60 * 60 * 1000


def parse_duration(value: int | float | str) -> int:
    """Convert a duration to whole milliseconds.

    Numbers are taken as milliseconds. Strings may carry a unit
    (``"500ms"``, ``"30s"``, ``"10m"``, ``"2h"``, ``"1d"``, ``"1w"``,
    ``"1y"``); a bare numeric string is milliseconds too.

    Raises:
        ConfigurationError: If the value is not a duration or is negative.
    """
    if isinstance(value, bool):
        msg = f"Invalid duration: {value!r}"
        raise ConfigurationError(msg)
    if isinstance(value, int | float):
        ms = float(value)
    elif isinstance(value, str):
        match = _DURATION_RE.match(value)
        if match is None:
            msg = f"Invalid duration: {value!r}"
            raise ConfigurationError(msg)
        ms = float(match.group(1)) * _UNIT_MS[(match.group(2) or "ms").lower()]
    else:
        msg = f"Invalid duration: {value!r}"
        raise ConfigurationError(msg)
    if ms < 0:
        msg = f"Duration must not be negative: {value!r}"
        raise ConfigurationError(msg)
    return int(ms)


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation."""

    debug: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class StaticConfig:
    """Configuration for ``ServeStatic``. Immutable after creation.

    ``root`` is resolved to an absolute path at construction; every
    other field keeps the value it was given. A new middleware instance
    is needed to change any of it.
    """

    root: str
    fallthrough: bool = True
    redirect: bool = True
    set_headers: SetHeaders | None = None
    max_age: int = 0
    prefer_precompressed: bool = False

    # Forwarded to the file sender
    index: tuple[str, ...] = ("index.html",)
    dotfiles: Dotfiles = "ignore"
    etag: bool = True
    last_modified: bool = True
    cache_control: bool = True
    immutable: bool = False
    extensions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in (
            "fallthrough",
            "redirect",
            "prefer_precompressed",
            "etag",
            "last_modified",
            "cache_control",
            "immutable",
        ):
            if not isinstance(getattr(self, name), bool):
                msg = f"option {name} must be a bool"
                raise ConfigurationError(msg)
        if self.set_headers is not None and not callable(self.set_headers):
            msg = "option set_headers must be callable"
            raise ConfigurationError(msg)
        if self.dotfiles not in ("allow", "deny", "ignore"):
            msg = f"option dotfiles must be 'allow', 'deny' or 'ignore', got {self.dotfiles!r}"
            raise ConfigurationError(msg)
        if not isinstance(self.max_age, int) or self.max_age < 0:
            msg = "option max_age must be a non-negative number of milliseconds"
            raise ConfigurationError(msg)
        for name in ("index", "extensions"):
            values = getattr(self, name)
            if not isinstance(values, tuple) or not all(
                isinstance(v, str) and v for v in values
            ):
                msg = f"option {name} must be a tuple of non-empty strings"
                raise ConfigurationError(msg)

    @classmethod
    def build(
        cls,
        root: str | os.PathLike[str] | None,
        *,
        max_age: int | float | str | None = None,
        maxage: int | float | str | None = None,
        index: str | tuple[str, ...] | list[str] | Literal[False] = ("index.html",),
        extensions: str | tuple[str, ...] | list[str] | Literal[False] = (),
        **options: Any,
    ) -> "StaticConfig":
        """Validate user-facing options and produce a config.

        Accepts the loose spellings callers use (``maxage`` alias,
        duration strings, a single index name, ``index=False``).

        Raises:
            ConfigurationError: If ``root`` is missing or not a path, or
                any option is invalid. Unknown option names are rejected.
        """
        if not root:
            msg = "root path required"
            raise ConfigurationError(msg)
        if not isinstance(root, str | os.PathLike):
            msg = "root path must be a string"
            raise ConfigurationError(msg)

        unknown = set(options) - {
            "fallthrough",
            "redirect",
            "set_headers",
            "prefer_precompressed",
            "dotfiles",
            "etag",
            "last_modified",
            "cache_control",
            "immutable",
        }
        if unknown:
            msg = f"Unknown option(s): {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)

        duration = max_age if max_age is not None else maxage
        return cls(
            root=str(Path(root).resolve()),
            max_age=min(parse_duration(duration or 0), MAX_MAX_AGE_MS),
            index=_as_names(index),
            extensions=tuple(ext.lstrip(".") for ext in _as_names(extensions)),
            **options,
        )


def _as_names(value: str | tuple[str, ...] | list[str] | Literal[False]) -> tuple[str, ...]:
    if value is False or value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(value)
    msg = f"Expected a name or a sequence of names, got {value!r}"
    raise ConfigurationError(msg)

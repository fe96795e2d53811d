"""HTTP headers: immutable request headers and mutable response headers.

``Headers`` is a read-only ``Mapping[str, str]`` over the raw byte pairs
of the ASGI scope; it decodes on access.

``MutableHeaders`` is the ordered, case-insensitive collection the file
sender builds before a response is frozen. ``headers`` listeners and
``set_headers`` callbacks mutate it in place.
"""

from collections.abc import Iterator, Mapping, MutableMapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Access raw header byte pairs for ASGI compatibility."""
        return self._raw


class MutableHeaders(MutableMapping[str, str]):
    """Ordered, case-insensitive, single-valued response headers.

    Setting a header replaces any previous value but keeps the casing
    and position of the first assignment, so the order headers were
    first set in is the order they go out on the wire.
    """

    __slots__ = ("_items",)

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        # lowercased name -> (display name, value)
        self._items: dict[str, tuple[str, str]] = {}
        if initial:
            for name, value in initial.items():
                self[name] = value

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()][1]

    def __setitem__(self, key: str, value: str | int) -> None:
        lower = key.lower()
        existing = self._items.get(lower)
        name = existing[0] if existing is not None else key
        self._items[lower] = (name, str(value))

    def __delitem__(self, key: str) -> None:
        del self._items[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        items = ", ".join(f"{name!r}: {value!r}" for name, value in self._items.values())
        return f"MutableHeaders({{{items}}})"

    def remove_content_headers(self) -> None:
        """Drop ``Content-*`` headers (used for 304 responses)."""
        for lower in [key for key in self._items if key.startswith("content-")]:
            del self._items[lower]

    def to_tuple(self) -> tuple[tuple[str, str], ...]:
        """Freeze into the ``(name, value)`` pairs responses carry."""
        return tuple(self._items.values())

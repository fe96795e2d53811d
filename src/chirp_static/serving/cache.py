"""Bounded LRU cache of resolved request paths.

Memoizes the (root, pathname) -> lookup path step so hot paths skip
repeated string work. It is purely an optimization: a cold cache, a
full cache, or no cache at all produce identical responses.
"""

import threading
from collections import OrderedDict
from collections.abc import Callable

# Matches the bound used by the dispatcher
DEFAULT_MAXSIZE = 1000


def identity(pathname: str) -> str:
    return pathname


class PathCache:
    """Least-recently-used map from ``root::pathname`` to a lookup path.

    A hit moves the entry to the most-recent end. A miss computes the
    value, evicts the least-recent entry when the cache is full, then
    inserts.

    Thread safety:
        All reads and writes happen under one ``threading.Lock``. On a
        single event loop there is no contention; under free-threading,
        concurrent workers sharing one middleware instance still see
        strict LRU order.
    """

    __slots__ = ("_entries", "_lock", "maxsize")

    def __init__(self, maxsize: int = DEFAULT_MAXSIZE) -> None:
        if maxsize < 1:
            msg = "maxsize must be at least 1"
            raise ValueError(msg)
        self.maxsize = maxsize
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key(pathname: str, root: str) -> str:
        return f"{root}::{pathname}"

    def resolve(
        self,
        pathname: str,
        root: str,
        compute: Callable[[str], str] = identity,
    ) -> str:
        """Return the lookup path for *pathname* under *root*.

        *compute* produces the value on a miss; it must be a pure
        function of *pathname*.
        """
        key = self.key(pathname, root)
        with self._lock:
            try:
                self._entries.move_to_end(key)
            except KeyError:
                pass
            else:
                return self._entries[key]

            value = compute(pathname)
            if len(self._entries) >= self.maxsize:
                self._entries.popitem(last=False)
            self._entries[key] = value
            return value

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

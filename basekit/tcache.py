"""A generic thread-local item cache built from magazines of items.

A backing allocator hands out items in batches ("magazines"). Each
per-thread handle keeps a loaded and a previous magazine so that most
allocations and frees never touch the shared state.
"""

from __future__ import annotations

import itertools
import threading
import weakref
from typing import Any, Callable, List, Optional, Sequence

AllocFn = Callable[[int], Sequence[Any]]
FreeFn = Callable[[List[Any]], None]

_registry_lock = threading.Lock()
_registry: "weakref.WeakValueDictionary[int, TCache]" = weakref.WeakValueDictionary()
_ids = itertools.count()


class TCache:
    """A cache of items shared by any number of per-thread handles.

    ``alloc(nr)`` must return ``nr`` items or raise MemoryError;
    ``free(items)`` gives items back to the backing allocator.
    """

    def __init__(
        self,
        name: str,
        alloc: AllocFn,
        free: FreeFn,
        mag_size: int,
        item_size: int,
    ) -> None:
        if mag_size < 1:
            raise ValueError(f"magazine size must be positive, got {mag_size}")
        if item_size < 1:
            raise ValueError(f"item size must be positive, got {item_size}")
        self.name = name
        self.mag_size = mag_size
        self.item_size = item_size
        self.mags_allocated = 0
        self._alloc = alloc
        self._free = free
        self._lock = threading.Lock()
        self._shared: List[List[Any]] = []
        with _registry_lock:
            _registry[next(_ids)] = self

    def __repr__(self) -> str:
        return (
            f"TCache(name={self.name!r}, mag_size={self.mag_size}, "
            f"mags_allocated={self.mags_allocated})"
        )

    @property
    def shared_mags(self) -> int:
        """Number of full magazines waiting in the shared pool."""
        with self._lock:
            return len(self._shared)

    def handle(self) -> "TCacheHandle":
        """Create a new per-thread handle on this cache."""
        return TCacheHandle(self)

    def _alloc_mag(self) -> List[Any]:
        items = list(self._alloc(self.mag_size))
        if len(items) != self.mag_size:
            raise RuntimeError(
                f"backing allocator returned {len(items)} items, "
                f"expected {self.mag_size}"
            )
        with self._lock:
            self.mags_allocated += 1
        # the first item handed out is the first one allocated
        items.reverse()
        return items

    def _free_mag(self, mag: List[Any]) -> None:
        if len(mag) != self.mag_size:
            raise RuntimeError("freeing a magazine that is not full")
        self._free(list(reversed(mag)))
        with self._lock:
            self.mags_allocated -= 1

    def _pop_shared(self) -> Optional[List[Any]]:
        with self._lock:
            return self._shared.pop() if self._shared else None

    def _push_shared(self, mag: List[Any]) -> None:
        with self._lock:
            self._shared.append(mag)

    def reclaim(self) -> None:
        """Return every magazine in the shared pool to the backing allocator."""
        with self._lock:
            mags, self._shared = self._shared, []
        for mag in reversed(mags):
            self._free_mag(mag)

    def usage(self) -> int:
        """Bytes held in magazines allocated from the backing allocator."""
        return self.mag_size * self.item_size * self.mags_allocated


class TCacheHandle:
    """A per-thread handle; not itself safe to share between threads."""

    def __init__(self, tc: TCache) -> None:
        self.tc = tc
        self.capacity = tc.mag_size
        self._loaded: List[Any] = []
        self._previous: Optional[List[Any]] = None

    @property
    def rounds(self) -> int:
        """Items left in the loaded magazine."""
        return len(self._loaded)

    def alloc(self) -> Any:
        """Take one item; raises MemoryError if the backing allocator fails."""
        if self._loaded:
            return self._loaded.pop()
        if self._previous is not None:
            self._loaded, self._previous = self._previous, None
        else:
            mag = self.tc._pop_shared()
            self._loaded = mag if mag is not None else self.tc._alloc_mag()
        return self._loaded.pop()

    def free(self, item: Any) -> None:
        """Give one item back to the cache."""
        if len(self._loaded) < self.capacity:
            self._loaded.append(item)
            return
        if self._previous is not None:
            self.tc._push_shared(self._previous)
        self._previous = self._loaded
        self._loaded = [item]


def usage_report() -> List[str]:
    """Return usage lines for every live cache, followed by a total."""
    lines = ["tcache: dumping usage statistics..."]
    total = 0
    with _registry_lock:
        caches = list(_registry.values())
    for tc in caches:
        usage = tc.usage()
        lines.append(f"{usage // 1024:8d} KB\t{tc.name}")
        total += usage
    lines.append(f"total: {total // 1024:8d} KB")
    return lines
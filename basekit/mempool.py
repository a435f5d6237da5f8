"""A simple preallocated, contiguous pool of fixed-size items.

Items never straddle page boundaries. An item is identified by its byte
offset into the pool's buffer.
"""

from __future__ import annotations

import threading
from typing import List

from basekit.tcache import TCache
from basekit.util import is_power_of_two


class Mempool:
    """A pool of ``item_len``-byte items carved out of ``length`` bytes."""

    def __init__(self, length: int, pgsize: int, item_len: int) -> None:
        if item_len <= 0 or not is_power_of_two(pgsize) or length % pgsize != 0:
            raise ValueError(
                f"invalid pool geometry: length={length}, "
                f"pgsize={pgsize}, item_len={item_len}"
            )
        self.length = length
        self.pgsize = pgsize
        self.item_len = item_len
        self.buffer = bytearray(length)
        self.allocated = 0
        self._lock = threading.Lock()
        per_page = pgsize // item_len
        self._free_items: List[int] = [
            pgsize * page + item_len * j
            for page in range(length // pgsize)
            for j in range(per_page)
        ]
        self._in_use: set = set()

    @property
    def capacity(self) -> int:
        """Total number of items in the pool."""
        return len(self._free_items)

    def _check(self, item: int) -> None:
        off = item % self.pgsize if isinstance(item, int) else -1
        if (
            not isinstance(item, int)
            or not 0 <= item < self.length
            or off % self.item_len != 0
            or off + self.item_len > self.pgsize
        ):
            raise ValueError(f"{item!r} is not an item of this pool")

    def _alloc_locked(self) -> int:
        if self.allocated >= self.capacity:
            raise MemoryError("mempool exhausted")
        item = self._free_items[self.allocated]
        self.allocated += 1
        self._in_use.add(item)
        return item

    def _free_locked(self, item: int) -> None:
        self._check(item)
        if item not in self._in_use:
            raise ValueError(f"item {item} is not allocated")
        self._in_use.discard(item)
        self.allocated -= 1
        self._free_items[self.allocated] = item

    def alloc(self) -> int:
        """Take an item; raises MemoryError when the pool is empty."""
        with self._lock:
            return self._alloc_locked()

    def free(self, item: int) -> None:
        """Return ``item`` to the pool."""
        with self._lock:
            self._free_locked(item)

    def view(self, item: int) -> memoryview:
        """Return a writable view of the bytes of ``item``."""
        self._check(item)
        return memoryview(self.buffer)[item:item + self.item_len]

    def create_tcache(self, name: str, mag_size: int) -> TCache:
        """Create a thread-local cache backed by this pool."""

        def alloc(nr: int) -> List[int]:
            items: List[int] = []
            with self._lock:
                try:
                    for _ in range(nr):
                        items.append(self._alloc_locked())
                except MemoryError:
                    for item in items:
                        self._free_locked(item)
                    raise
            return items

        def free(items: List[int]) -> None:
            with self._lock:
                for item in items:
                    self._free_locked(item)

        return TCache(name, alloc, free, mag_size, self.item_len)
"""A fixed-size bit array with search helpers."""

from __future__ import annotations

import threading
from typing import Iterator


class Bitmap:
    """A bit array of ``nbits`` bits, all set or all cleared initially."""

    def __init__(self, nbits: int, state: bool = False) -> None:
        if nbits < 0:
            raise ValueError("nbits must be non-negative")
        self._nbits = nbits
        self._full = (1 << nbits) - 1
        self._bits = self._full if state else 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self._nbits

    def __repr__(self) -> str:
        return f"Bitmap(nbits={self._nbits}, set={list(self.iter_set())})"

    def _check(self, pos: int) -> int:
        if not 0 <= pos < self._nbits:
            raise IndexError(f"bit {pos} out of range for {self._nbits}-bit map")
        return 1 << pos

    def set(self, pos: int) -> None:
        """Set bit ``pos``."""
        mask = self._check(pos)
        with self._lock:
            self._bits |= mask

    def clear(self, pos: int) -> None:
        """Clear bit ``pos``."""
        mask = self._check(pos)
        with self._lock:
            self._bits &= ~mask

    def test(self, pos: int) -> bool:
        """Return True if bit ``pos`` is set."""
        return bool(self._bits & self._check(pos))

    def test_and_set(self, pos: int) -> bool:
        """Set bit ``pos`` and return whether it was set before."""
        mask = self._check(pos)
        with self._lock:
            old = bool(self._bits & mask)
            self._bits |= mask
        return old

    def fill(self, state: bool) -> None:
        """Set every bit if ``state`` is true, otherwise clear every bit."""
        with self._lock:
            self._bits = self._full if state else 0

    def _find_next(self, bits: int, pos: int) -> int:
        if pos < 0:
            raise IndexError("start position must be non-negative")
        if pos >= self._nbits:
            return self._nbits
        val = bits >> pos
        if not val:
            return self._nbits
        return min(pos + (val & -val).bit_length() - 1, self._nbits)

    def find_next_set(self, pos: int) -> int:
        """Index of the first set bit at or after ``pos``, or ``len(self)``."""
        return self._find_next(self._bits, pos)

    def find_next_cleared(self, pos: int) -> int:
        """Index of the first cleared bit at or after ``pos``, or ``len(self)``."""
        return self._find_next(~self._bits & self._full, pos)

    def iter_set(self) -> Iterator[int]:
        """Yield the index of every set bit in ascending order."""
        pos = self.find_next_set(0)
        while pos < self._nbits:
            yield pos
            pos = self.find_next_set(pos + 1)

    def iter_cleared(self) -> Iterator[int]:
        """Yield the index of every cleared bit in ascending order."""
        pos = self.find_next_cleared(0)
        while pos < self._nbits:
            yield pos
            pos = self.find_next_cleared(pos + 1)
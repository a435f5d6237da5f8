"""Registration and collection of statistics counters."""

from __future__ import annotations

import errno
import itertools
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple


@dataclass(eq=False)
class StatEntry:
    """A named counter whose value is read from ``source``."""

    name: str
    source: Callable[[], int] = field(repr=False)

    def collect(self) -> int:
        """Return the counter's current value."""
        return int(self.source())


class StatRegistry:
    """A bounded, ordered collection of registered counters."""

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = limit
        self._lock = threading.Lock()
        self._entries: List[StatEntry] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def register(self, entry: StatEntry) -> None:
        """Add ``entry``; raises OSError(ENOSPC) once the limit is reached."""
        with self._lock:
            if len(self._entries) >= self.limit:
                raise OSError(errno.ENOSPC, "stat counter limit reached")
            self._entries.append(entry)

    def unregister(self, entry: StatEntry) -> None:
        """Remove ``entry``; raises ValueError if it is not registered."""
        with self._lock:
            for i, registered in enumerate(self._entries):
                if registered is entry:
                    del self._entries[i]
                    return
        raise ValueError(f"stat {entry.name!r} is not registered")

    def collect_all(self, capacity: Optional[int] = None) -> List[Tuple[str, int]]:
        """Return ``(name, value)`` pairs in registration order, at most ``capacity``."""
        with self._lock:
            entries = self._entries if capacity is None else itertools.islice(
                self._entries, max(capacity, 0)
            )
            return [(e.name, e.collect()) for e in entries]

    def format_all(self) -> List[str]:
        """Return printable lines for every registered counter."""
        lines = ["stat: dumping stat counters"]
        lines.extend(f"\t{name}:{val}" for name, val in self.collect_all(self.limit))
        return lines
"""Staged initialization of the base library and of each thread."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

EARLY = "early"
NORMAL = "normal"
LATE = "late"
THREAD = "thread"

BASE_LEVELS = (EARLY, NORMAL, LATE)
_ALL_LEVELS = BASE_LEVELS + (THREAD,)

InitFn = Callable[[], Optional[int]]

_log = logging.getLogger(__name__)


class InitError(RuntimeError):
    """An initialization handler reported failure."""

    def __init__(self, name: str, code: int) -> None:
        super().__init__(f"init: {name} failed, ret = {code}")
        self.name = name
        self.code = code


class Initializer:
    """Runs registered handlers level by level, stopping at the first failure.

    A handler returns None or 0 on success and a non-zero code on failure;
    exceptions it raises propagate unchanged.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Tuple[str, InitFn]]] = {
            level: [] for level in _ALL_LEVELS
        }
        self._lock = threading.Lock()
        self._thread_ids = itertools.count()
        self._local = threading.local()
        self.base_init_done = False

    @property
    def thread_init_done(self) -> bool:
        """Whether the calling thread has completed thread initialization."""
        return getattr(self._local, "done", False)

    @property
    def thread_id(self) -> Optional[int]:
        """The id given to the calling thread, or None before thread_init."""
        return getattr(self._local, "thread_id", None)

    def _level(self, level: str) -> List[Tuple[str, InitFn]]:
        try:
            return self._handlers[level]
        except KeyError:
            raise ValueError(f"unknown init level: {level!r}") from None

    def register(self, level: str, name: str, func: InitFn) -> None:
        """Add ``func`` to run at ``level``, after those already registered."""
        handlers = self._level(level)
        with self._lock:
            handlers.append((name, func))

    def run_level(self, level: str) -> None:
        """Run every handler of ``level`` in order."""
        with self._lock:
            handlers = list(self._level(level))
        _log.debug("init: entering '%s' init", level)
        for name, func in handlers:
            _log.debug("init: -> %s", name)
            ret = func()
            if ret:
                _log.debug("init: failed, ret = %d", ret)
                raise InitError(name, ret)

    def base_init(self) -> None:
        """Run the early, normal and late levels; call once before use."""
        for level in BASE_LEVELS:
            self.run_level(level)
        self.base_init_done = True

    def thread_init(self) -> int:
        """Prepare the calling thread; returns the thread's id."""
        thread_id = next(self._thread_ids)
        self._local.thread_id = thread_id
        self.run_level(THREAD)
        self._local.done = True
        return thread_id
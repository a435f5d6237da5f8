"""Leveled logging with once/first-n/rate-limited variants and bug checks."""

from __future__ import annotations

import enum
import inspect
import sys
import threading
import time
import traceback
from typing import Callable, Dict, Optional, Set, TextIO, Tuple

ONE_SECOND = 1_000_000
MAX_LOG_LEN = 4096


class LogLevel(enum.IntEnum):
    """Message severities; larger numbers are less severe."""

    EMERG = 0
    CRIT = 1
    ERR = 2
    WARN = 3
    NOTICE = 4
    INFO = 5
    DEBUG = 6


class BugError(RuntimeError):
    """Raised when a fatal assertion fails."""


def _caller(depth: int) -> str:
    frame = inspect.currentframe()
    for _ in range(depth + 1):
        frame = frame.f_back if frame is not None else None
    if frame is None:
        return "?"
    code = frame.f_code
    return f"{code.co_filename}:{frame.f_lineno} {code.co_name}"


class Logger:
    """Writes one line per message to a stream.

    ``clock`` returns microseconds since start; when given, every line is
    prefixed with a ``[sec.usec]`` timestamp.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        max_level: int = LogLevel.DEBUG,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.stream = stream
        self.max_level = LogLevel(max_level)
        self.clock = clock
        self._lock = threading.Lock()
        self._once: Set[str] = set()
        self._first_n: Dict[str, int] = {}
        self._rate: Dict[str, Tuple[int, int]] = {}

    def _now(self) -> int:
        if self.clock is not None:
            return int(self.clock())
        return time.monotonic_ns() // 1000

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def log(self, level: int, msg: str) -> Optional[str]:
        """Write ``msg`` at ``level``; return the line written, or None if filtered."""
        level = LogLevel(level)
        if level > self.max_level:
            return None
        if self.clock is not None:
            us = int(self.clock())
            prefix = f"[{us // ONE_SECOND:3d}.{us % ONE_SECOND:06d}] <{int(level)}> "
        else:
            prefix = f"<{int(level)}> "
        line = (prefix + msg)[: MAX_LOG_LEN - 1]
        with self._lock:
            out = self._out()
            out.write(line + "\n")
            if level <= LogLevel.ERR:
                out.flush()
        return line

    def once(self, key: str, level: int, msg: str) -> bool:
        """Log ``msg`` only the first time ``key`` is seen."""
        with self._lock:
            if key in self._once:
                return False
            self._once.add(key)
        self.log(level, msg)
        return True

    def first_n(self, key: str, num: int, level: int, msg: str) -> bool:
        """Log ``msg`` only for the first ``num`` calls with ``key``."""
        with self._lock:
            left = self._first_n.setdefault(key, num)
            if left <= 0:
                return False
            self._first_n[key] = left - 1
        self.log(level, msg)
        return True

    def ratelimited(self, key: str, level: int, msg: str) -> bool:
        """Log ``msg`` at most once per second for ``key``, counting drops."""
        now = self._now()
        with self._lock:
            last, suppressed = self._rate.get(key, (0, 0))
            if now - last < ONE_SECOND:
                self._rate[key] = (last, suppressed + 1)
                return False
            self._rate[key] = (now, 0)
        if suppressed:
            self.log(level, f"{key} suppressed {suppressed} times")
        self.log(level, msg)
        return True

    def bug(self, fatal: bool, expr: str, where: Optional[str] = None) -> None:
        """Report a failed assertion; raise BugError if ``fatal``."""
        if where is None:
            where = _caller(1)
        message = (
            f"{'FATAL' if fatal else 'WARN'}: {where} ASSERTION '{expr}' FAILED"
        )
        self.log(LogLevel.EMERG, message)
        with self._lock:
            self._out().write("".join(traceback.format_stack()[:-1]))
        if fatal:
            raise BugError(message)

    def bug_on(self, cond: bool, expr: str = "", where: Optional[str] = None) -> None:
        """Raise BugError (after logging) if ``cond`` is true."""
        if cond:
            self.bug(True, expr, where if where is not None else _caller(1))

    def warn_on(self, cond: bool, expr: str = "", where: Optional[str] = None) -> bool:
        """Log a warning if ``cond`` is true; return ``cond``."""
        if cond:
            self.bug(False, expr, where if where is not None else _caller(1))
        return bool(cond)
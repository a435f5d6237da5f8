"""Parsers for single-line sysfs files: integers and bit lists."""

from __future__ import annotations

import errno
import string
from typing import Tuple

from basekit.bitmap import Bitmap

BUFSIZ = 8192
INT_MAX = 0x7FFFFFFF
_U64 = (1 << 64) - 1
_WS = " \t\n\v\f\r"


class SysfsError(OSError):
    """A sysfs file could not be read or parsed; ``errno`` tells why."""

    def __init__(self, err: int, message: str, path: str = None) -> None:
        super().__init__(err, message, path)


def _read_line(path: str) -> str:
    try:
        with open(path, encoding="ascii", errors="replace") as f:
            line = f.readline(BUFSIZ - 1)
    except OSError as exc:
        raise SysfsError(errno.EIO, "cannot read file", str(path)) from exc
    if not line:
        raise SysfsError(errno.EIO, "file is empty", str(path))
    return line


def _strtoull(text: str, pos: int, path: str) -> Tuple[int, int]:
    """Parse an unsigned integer like strtoull(..., 0); return (value, end)."""
    i, n = pos, len(text)
    while i < n and text[i] in _WS:
        i += 1
    neg = False
    if i < n and text[i] in "+-":
        neg = text[i] == "-"
        i += 1
    if text.startswith(("0x", "0X"), i) and i + 2 < n and text[i + 2] in string.hexdigits:
        base, i = 16, i + 2
    elif i < n and text[i] == "0":
        base = 8
    else:
        base = 10
    digits = "0123456789abcdef"[:base]
    start = i
    while i < n and text[i].lower() in digits:
        i += 1
    if i == start:
        return 0, pos
    val = int(text[start:i], base)
    if val > _U64:
        raise SysfsError(errno.ERANGE, "value out of range", path)
    if neg:
        val = -val & _U64
    return val, i


def parse_val(path: str) -> int:
    """Parse a 64-bit unsigned value from the first line of ``path``."""
    path = str(path)
    line = _read_line(path)
    val, end = _strtoull(line, 0, path)
    if end == 0 or end >= len(line) or line[end] != "\n":
        raise SysfsError(errno.EINVAL, "malformed value", path)
    return val


def _parse_bit(line: str, pos: int, path: str) -> Tuple[int, int]:
    val, end = _strtoull(line, pos, path)
    if end == pos:
        raise SysfsError(errno.EINVAL, "malformed bit list", path)
    if val > INT_MAX:
        raise SysfsError(errno.ERANGE, "bit index too large", path)
    return val, end


def parse_bitlist(path: str, nbits: int) -> Bitmap:
    """Parse a list such as ``0-3,8`` from ``path`` into an ``nbits`` bitmap."""
    path = str(path)
    line = _read_line(path)
    bits = Bitmap(nbits, False)
    pos = 0
    while pos < len(line) and line[pos] != "\n":
        if line[pos] == ",":
            pos += 1
            continue
        bit_start, pos = _parse_bit(line, pos, path)
        if pos < len(line) and line[pos] == "-":
            bit_end, pos = _parse_bit(line, pos + 1, path)
        else:
            bit_end = bit_start
        if bit_end < bit_start:
            raise SysfsError(errno.EINVAL, "reversed bit range", path)
        if bit_end >= nbits:
            raise SysfsError(errno.ERANGE, "bit index exceeds bitmap", path)
        for b in range(bit_start, bit_end + 1):
            bits.set(b)
    return bits
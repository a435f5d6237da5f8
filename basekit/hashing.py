"""Hash functions for small keys: Jenkins lookup3, CRC32C and CityHash."""

from __future__ import annotations

from typing import Tuple, Union

_M32 = 0xFFFFFFFF
_M64 = 0xFFFFFFFFFFFFFFFF

_CRC32C_POLY = 0x82F63B78
_CITY_K2 = 0x9AE16A3B2F90404F

BytesLike = Union[bytes, bytearray, memoryview]


def _make_crc32c_table() -> Tuple[int, ...]:
    table = []
    for n in range(256):
        crc = n
        for _ in range(8):
            crc = (crc >> 1) ^ _CRC32C_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC32C_TABLE = _make_crc32c_table()


def _check_range(name: str, value: int, mask: int) -> int:
    if not 0 <= value <= mask:
        raise ValueError(f"{name} out of range: {value}")
    return value


# --- Jenkins lookup3 ("hashlittle") -----------------------------------------


def _rot(x: int, k: int) -> int:
    return ((x << k) | (x >> (32 - k))) & _M32


def _mix(a: int, b: int, c: int) -> Tuple[int, int, int]:
    a = (a - c) & _M32; a ^= _rot(c, 4); c = (c + b) & _M32
    b = (b - a) & _M32; b ^= _rot(a, 6); a = (a + c) & _M32
    c = (c - b) & _M32; c ^= _rot(b, 8); b = (b + a) & _M32
    a = (a - c) & _M32; a ^= _rot(c, 16); c = (c + b) & _M32
    b = (b - a) & _M32; b ^= _rot(a, 19); a = (a + c) & _M32
    c = (c - b) & _M32; c ^= _rot(b, 4); b = (b + a) & _M32
    return a, b, c


def _final(a: int, b: int, c: int) -> Tuple[int, int, int]:
    c ^= b; c = (c - _rot(b, 14)) & _M32
    a ^= c; a = (a - _rot(c, 11)) & _M32
    b ^= a; b = (b - _rot(a, 25)) & _M32
    c ^= b; c = (c - _rot(b, 16)) & _M32
    a ^= c; a = (a - _rot(c, 4)) & _M32
    b ^= a; b = (b - _rot(a, 14)) & _M32
    c ^= b; c = (c - _rot(b, 24)) & _M32
    return a, b, c


def _words(block: bytes) -> Tuple[int, int, int]:
    padded = block.ljust(12, b"\0")
    return (
        int.from_bytes(padded[0:4], "little"),
        int.from_bytes(padded[4:8], "little"),
        int.from_bytes(padded[8:12], "little"),
    )


def jenkins_hash(key: BytesLike) -> int:
    """Return the 32-bit Jenkins lookup3 hash of ``key`` (initial value 0)."""
    data = bytes(key)
    length = len(data)
    a = b = c = (0xDEADBEEF + length) & _M32

    pos = 0
    while length - pos > 12:
        ka, kb, kc = _words(data[pos:pos + 12])
        a = (a + ka) & _M32
        b = (b + kb) & _M32
        c = (c + kc) & _M32
        a, b, c = _mix(a, b, c)
        pos += 12

    tail = data[pos:]
    if not tail:
        return c  # zero-length tails need no final mixing

    ka, kb, kc = _words(tail)
    a = (a + ka) & _M32
    b = (b + kb) & _M32
    c = (c + kc) & _M32
    _, _, c = _final(a, b, c)
    return c


# --- CRC32C ---------------------------------------------------------------


def crc32c_u64(crc: int, val: int) -> int:
    """Fold the 64-bit word ``val`` into the CRC32C register ``crc``.

    Matches the hardware ``crc32q`` step: the word is consumed as eight
    little-endian bytes with no pre- or post-inversion.
    """
    crc = _check_range("crc", crc, _M64) & _M32
    val = _check_range("val", val, _M64)
    for byte in val.to_bytes(8, "little"):
        crc = _CRC32C_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc


def hash_crc32c_one(seed: int, val: int) -> int:
    """Hash one 64-bit word with CRC32C, returning a 32-bit value."""
    _check_range("seed", seed, _M32)
    return crc32c_u64(seed, val)


def hash_crc32c_two(seed: int, a: int, b: int) -> int:
    """Hash two 64-bit words with CRC32C, returning a 32-bit value."""
    _check_range("seed", seed, _M32)
    return crc32c_u64(crc32c_u64(seed, a), b)


# --- CityHash (small inputs) ------------------------------------------------


def _city_len16(u: int, v: int, mul: int) -> int:
    a = ((u ^ v) * mul) & _M64
    a ^= a >> 47
    b = ((v ^ a) * mul) & _M64
    b ^= b >> 47
    return (b * mul) & _M64


def _city_rotate(val: int, shift: int) -> int:
    return ((val >> shift) | (val << (64 - shift))) & _M64


def _city(first: int, second: int, mul: int) -> int:
    a = (first + _CITY_K2) & _M64
    b = second
    c = (_city_rotate(b, 37) * mul + a) & _M64
    d = (((_city_rotate(a, 25) + b) & _M64) * mul) & _M64
    return _city_len16(c, d, mul)


def hash_city_one(val: int) -> int:
    """Hash one 64-bit word with CityHash, returning a 64-bit value."""
    val = _check_range("val", val, _M64)
    return _city(val, val, (_CITY_K2 + 16) & _M64)


def hash_city_two(val_a: int, val_b: int) -> int:
    """Hash two 64-bit words with CityHash, returning a 64-bit value."""
    val_a = _check_range("val_a", val_a, _M64)
    val_b = _check_range("val_b", val_b, _M64)
    return _city(val_a, val_b, (_CITY_K2 + 32) & _M64)
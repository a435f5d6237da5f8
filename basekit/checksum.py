"""Internet (RFC 1071) checksums over little-endian 16-bit words."""

from __future__ import annotations

import struct

_M16 = 0xFFFF
_M32 = 0xFFFFFFFF
_M64 = 0xFFFFFFFFFFFFFFFF


def _raw_sum(buf: bytes, total: int = 0) -> int:
    data = bytes(buf)
    even = len(data) & ~1
    for (word,) in struct.iter_unpack("<H", data[:even]):
        total = (total + word) & _M32
    if len(data) & 1:
        total = (total + data[-1]) & _M32
    return total


def _reduce(total: int) -> int:
    total = ((total & 0xFFFF0000) >> 16) + (total & _M16)
    total = ((total & 0xFFFF0000) >> 16) + (total & _M16)
    return total & _M16


def raw_cksum(buf: bytes) -> int:
    """Return the non-complemented 16-bit sum of ``buf``."""
    return _reduce(_raw_sum(buf))


def ipv4_phdr_cksum(proto: int, saddr: int, daddr: int, l4len: int) -> int:
    """Return the non-complemented checksum of an IPv4 pseudo-header."""
    if not 0 <= l4len <= _M16:
        raise ValueError(f"L4 length out of range: {l4len}")
    header = struct.pack("!IIBBH", saddr & _M32, daddr & _M32, 0, proto & 0xFF, l4len)
    return raw_cksum(header)


def ipv4_udptcp_cksum(proto: int, saddr: int, daddr: int, l4hdr: bytes) -> int:
    """Return the UDP/TCP checksum for ``l4hdr`` (header plus payload).

    The checksum field inside ``l4hdr`` must be zero. A result of zero is
    reported as 0xffff.
    """
    l4len = len(l4hdr)
    cksum = raw_cksum(l4hdr) + ipv4_phdr_cksum(proto, saddr, daddr, l4len)
    cksum = ((cksum & 0xFFFF0000) >> 16) + (cksum & _M16)
    cksum = ~cksum & _M16
    return cksum or _M16


def _add_carry(a: int, b: int) -> int:
    s = a + b
    return (s & _M64) + (s >> 64)


def chksum_internet(buf: bytes) -> int:
    """Return the complemented 16-bit one's-complement checksum of ``buf``."""
    data = bytes(buf)
    n = len(data)
    total = 0
    carry = 0
    chunks = n & ~7
    for (word,) in struct.iter_unpack("<Q", data[:chunks]):
        s = total + word + carry
        total, carry = s & _M64, s >> 64
    total = (total + carry) & _M64
    pos = chunks
    if n & 4:
        total = _add_carry(total, struct.unpack_from("<I", data, pos)[0])
        pos += 4
    if n & 2:
        total = _add_carry(total, struct.unpack_from("<H", data, pos)[0])
        pos += 2
    if n & 1:
        total = _add_carry(total, data[pos])

    folded = (total & _M32) + (total >> 32)
    folded = ((folded & _M32) + (folded >> 32)) & _M32
    half = (folded >> 16) + (folded & _M16)
    half = ((half & _M16) + (half >> 16)) & _M16
    return ~half & _M16
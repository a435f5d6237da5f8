"""Small arithmetic helpers: alignment, rounding and wrap-safe comparisons."""

CACHE_LINE_SIZE = 64
WORD_SIZE = 64

KB = 1024
MB = 1024 * KB
GB = 1024 * MB

_U32_MASK = 0xFFFFFFFF


def bit(n: int) -> int:
    """Return an integer with only bit ``n`` set."""
    return 1 << n


def is_power_of_two(x: int) -> bool:
    """Return True if ``x`` is a (positive) power of two."""
    return x > 0 and not (x & (x - 1))


def _check_align(align: int) -> None:
    if not is_power_of_two(align):
        raise ValueError(f"alignment must be a power of two, got {align}")


def align_up(x: int, align: int) -> int:
    """Round ``x`` up to a multiple of ``align`` (a power of two)."""
    _check_align(align)
    return ((x - 1) | (align - 1)) + 1


def align_down(x: int, align: int) -> int:
    """Round ``x`` down to a multiple of ``align`` (a power of two)."""
    _check_align(align)
    return x & ~(align - 1)


def div_up(x: int, d: int) -> int:
    """Divide ``x`` by ``d``, rounding the quotient up."""
    if d == 0:
        raise ZeroDivisionError("division by zero")
    return (x + d - 1) // d


def _signed_diff32(a: int, b: int) -> int:
    diff = (a - b) & _U32_MASK
    return diff - (1 << 32) if diff & 0x80000000 else diff


def wraps_lt(a: int, b: int) -> bool:
    """``a < b`` for 32-bit sequence numbers, safe across wrap-around."""
    return _signed_diff32(a, b) < 0


def wraps_lte(a: int, b: int) -> bool:
    """``a <= b`` for 32-bit sequence numbers, safe across wrap-around."""
    return _signed_diff32(a, b) <= 0


def wraps_gt(a: int, b: int) -> bool:
    """``a > b`` for 32-bit sequence numbers, safe across wrap-around."""
    return _signed_diff32(b, a) < 0


def wraps_gte(a: int, b: int) -> bool:
    """``a >= b`` for 32-bit sequence numbers, safe across wrap-around."""
    return _signed_diff32(b, a) <= 0
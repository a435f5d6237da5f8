import pytest

from basekit.hashing import (
    crc32c_u64,
    hash_city_one,
    hash_city_two,
    hash_crc32c_one,
    hash_crc32c_two,
    jenkins_hash,
)

M32 = 0xFFFFFFFF
M64 = 0xFFFFFFFFFFFFFFFF


def test_jenkins_empty_key_is_initial_state():
    assert jenkins_hash(b"") == 0xDEADBEEF


def test_jenkins_reference_sentence():
    assert jenkins_hash(b"Four score and seven years ago") == 0x17770551


@pytest.mark.parametrize("length", [1, 3, 4, 5, 11, 12, 13, 24, 25, 100])
def test_jenkins_range_and_determinism(length):
    key = bytes(range(length))
    first = jenkins_hash(key)
    assert 0 <= first <= M32
    assert jenkins_hash(key) == first


def test_jenkins_accepts_bytes_like():
    key = b"hello world, hashing"
    expected = jenkins_hash(key)
    assert jenkins_hash(bytearray(key)) == expected
    assert jenkins_hash(memoryview(key)) == expected


def test_jenkins_length_matters():
    values = {jenkins_hash(b"\0" * n) for n in range(1, 30)}
    assert len(values) == 29


def test_jenkins_rejects_text():
    with pytest.raises(TypeError):
        jenkins_hash("text")


def test_crc32c_zero_is_zero():
    assert crc32c_u64(0, 0) == 0


@pytest.mark.parametrize("c", [0, 1, 0x12345678, M32, 0xDEADBEEF])
def test_crc32c_of_own_register_is_zero(c):
    assert crc32c_u64(c, c) == 0


@pytest.mark.parametrize(
    "a, x, b, y",
    [
        (1, 2, 3, 4),
        (0xDEADBEEF, 0x0123456789ABCDEF, 0x1, M64),
        (M32, 0, 0, M64),
    ],
)
def test_crc32c_is_linear(a, x, b, y):
    assert crc32c_u64(a ^ b, x ^ y) == crc32c_u64(a, x) ^ crc32c_u64(b, y)


def test_crc32c_ignores_upper_register_bits():
    assert crc32c_u64(0xABCD00000000 | 0x55, 7) == crc32c_u64(0x55, 7)


def test_crc32c_range():
    result = crc32c_u64(M32, M64)
    assert 0 <= result <= M32


def test_hash_crc32c_two_chains_one():
    seed, a, b = 0x1234, 0xFEEDFACE, 0xCAFEBABE
    assert hash_crc32c_two(seed, a, b) == hash_crc32c_one(
        hash_crc32c_one(seed, a), b
    )


def test_hash_crc32c_rejects_bad_seed():
    with pytest.raises(ValueError):
        hash_crc32c_one(1 << 32, 0)
    with pytest.raises(ValueError):
        hash_crc32c_two(-1, 0, 0)


def test_crc32c_rejects_bad_value():
    with pytest.raises(ValueError):
        crc32c_u64(0, 1 << 64)


@pytest.mark.parametrize("val", [0, 1, 42, 0xDEADBEEF, M64])
def test_city_one_range_and_determinism(val):
    h = hash_city_one(val)
    assert 0 <= h <= M64
    assert hash_city_one(val) == h


def test_city_one_distinct_for_small_inputs():
    values = {hash_city_one(v) for v in range(256)}
    assert len(values) == 256


def test_city_two_order_matters():
    pairs = {hash_city_two(a, b) for a in range(16) for b in range(16)}
    assert len(pairs) == 256


def test_city_two_differs_from_one():
    ones = {hash_city_one(v) for v in range(32)}
    twos = {hash_city_two(v, v) for v in range(32)}
    assert len(ones) == 32
    assert len(twos) == 32
    assert len(ones | twos) == 64


def test_city_rejects_out_of_range():
    with pytest.raises(ValueError):
        hash_city_one(-1)
    with pytest.raises(ValueError):
        hash_city_two(0, 1 << 64)
import pytest

from basekit.mempool import Mempool


@pytest.mark.parametrize(
    "length,pgsize,item_len",
    [(8192, 4096, 0), (8192, 3000, 100), (5000, 4096, 64)],
)
def test_invalid_geometry(length, pgsize, item_len):
    with pytest.raises(ValueError):
        Mempool(length, pgsize, item_len)


def test_capacity_skips_page_tails():
    m = Mempool(8192, 4096, 1000)
    assert m.capacity == 8


def test_items_never_straddle_pages():
    m = Mempool(8192, 4096, 1000)
    items = [m.alloc() for _ in range(m.capacity)]
    assert len(set(items)) == m.capacity
    for item in items:
        assert item % 4096 + 1000 <= 4096


def test_alloc_in_address_order():
    m = Mempool(4096, 4096, 64)
    assert [m.alloc() for _ in range(3)] == [0, 64, 128]


def test_exhaustion_raises_memory_error():
    m = Mempool(4096, 4096, 2048)
    m.alloc()
    m.alloc()
    with pytest.raises(MemoryError):
        m.alloc()
    assert m.allocated == 2


def test_free_makes_item_available_again():
    m = Mempool(4096, 4096, 2048)
    a = m.alloc()
    m.alloc()
    m.free(a)
    assert m.allocated == 1
    assert m.alloc() == a


def test_free_rejects_foreign_and_double_free():
    m = Mempool(4096, 4096, 64)
    item = m.alloc()
    with pytest.raises(ValueError):
        m.free(item + 1)
    with pytest.raises(ValueError):
        m.free(4096)
    m.free(item)
    with pytest.raises(ValueError):
        m.free(item)


def test_view_reads_back_written_bytes():
    m = Mempool(4096, 4096, 16)
    item = m.alloc()
    v = m.view(item)
    v[:5] = b"hello"
    assert bytes(m.view(item)[:5]) == b"hello"
    assert len(v) == m.item_len


def test_tcache_over_pool():
    m = Mempool(4096, 4096, 64)
    tc = m.create_tcache("pool", 4)
    h = tc.handle()
    items = [h.alloc() for _ in range(5)]
    assert len(set(items)) == 5
    assert m.allocated == 8
    assert tc.item_size == m.item_len


def test_tcache_failure_rolls_back():
    m = Mempool(4096, 4096, 1024)
    m.alloc()
    tc = m.create_tcache("tight", 4)
    with pytest.raises(MemoryError):
        tc.handle().alloc()
    assert m.allocated == 1
import errno

import pytest

from basekit.stat import StatEntry, StatRegistry


def const(n):
    return lambda: n


def test_collect_reads_source():
    counter = {"hits": 0}
    entry = StatEntry("hits", lambda: counter["hits"])
    counter["hits"] = 7
    assert entry.collect() == 7


def test_collect_all_in_registration_order():
    reg = StatRegistry(8)
    reg.register(StatEntry("a", const(1)))
    reg.register(StatEntry("b", const(2)))
    reg.register(StatEntry("c", const(3)))
    assert reg.collect_all() == [("a", 1), ("b", 2), ("c", 3)]


def test_capacity_truncates():
    reg = StatRegistry(8)
    for name in "abcd":
        reg.register(StatEntry(name, const(0)))
    assert [n for n, _ in reg.collect_all(2)] == ["a", "b"]


def test_limit_raises_enospc():
    reg = StatRegistry(1)
    reg.register(StatEntry("a", const(1)))
    with pytest.raises(OSError) as info:
        reg.register(StatEntry("b", const(2)))
    assert info.value.errno == errno.ENOSPC
    assert len(reg) == 1


def test_unregister_frees_slot():
    reg = StatRegistry(1)
    entry = StatEntry("a", const(1))
    reg.register(entry)
    reg.unregister(entry)
    assert reg.collect_all() == []
    reg.register(StatEntry("b", const(2)))
    assert reg.collect_all() == [("b", 2)]


def test_unregister_unknown_raises():
    reg = StatRegistry(4)
    with pytest.raises(ValueError):
        reg.unregister(StatEntry("ghost", const(0)))


def test_format_all():
    reg = StatRegistry(4)
    reg.register(StatEntry("rx", const(5)))
    assert reg.format_all() == ["stat: dumping stat counters", "\trx:5"]
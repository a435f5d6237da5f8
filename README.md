# basekit

Small building blocks for systems and networking code, in pure Python with
no third-party dependencies.

## Modules

- `basekit.util`: integer helpers `is_power_of_two`, `align_up`,
  `align_down` (both raise `ValueError` for an alignment that is not a power
  of two), `div_up`, `bit`, and comparisons for 32-bit sequence numbers that
  are safe across wrap-around: `wraps_lt`, `wraps_lte`, `wraps_gt`,
  `wraps_gte`.
- `basekit.bitmap`: `Bitmap(nbits, state)`, a fixed-size bit array with
  `set`, `clear`, `test`, `test_and_set`, `fill`, `find_next_set`,
  `find_next_cleared`, `iter_set` and `iter_cleared`. The search methods
  return `len(bitmap)` when nothing is found; out-of-range bits raise
  `IndexError`.
- `basekit.checksum`: Internet (RFC 1071) checksums. `raw_cksum` gives the
  non-complemented sum, `chksum_internet` the complemented one,
  `ipv4_phdr_cksum` the IPv4 pseudo-header sum, and `ipv4_udptcp_cksum` the
  full UDP/TCP checksum of a header-plus-payload (zero is reported as
  `0xffff`).
- `basekit.hashing`: `jenkins_hash` (lookup3, little-endian) for byte
  strings; CRC32C word hashing with `crc32c_u64`, `hash_crc32c_one` and
  `hash_crc32c_two`; and the small-input CityHash functions `hash_city_one`
  and `hash_city_two`.
- `basekit.log`: `Logger(stream, max_level, clock)` writes one line per
  message as `<level> message`, prefixed with `[sec.usec]` when a
  microsecond `clock` is given. It has `log`, `once`, `first_n`,
  `ratelimited` (at most once per second per key, reporting how many were
  suppressed), and `bug`, `bug_on` and `warn_on`; fatal ones raise
  `BugError`. Levels are in `LogLevel`.
- `basekit.sysfs`: `parse_val` reads a single integer and `parse_bitlist`
  reads a list such as `0-3,8` into a `Bitmap`. Both raise `SysfsError`
  (an `OSError` whose `errno` says why).
- `basekit.cpu`: `scan_topology(root, max_cpus, max_nodes)` reads online
  NUMA nodes and CPUs under a sysfs `devices/system` directory and returns a
  `Topology` of `CpuInfo` records; non-contiguous or unsupported counts
  raise `ValueError`.
- `basekit.pci`: `PciAddr.parse` reads `DDDD:BB:SS.f` addresses;
  `PciDev.scan` reads a device's IDs, NUMA node, VF count and six BARs
  (`PciBar`) from sysfs; `find_mem_bar` picks a memory BAR; `resource_path`
  names the sysfs file that would map a BAR.
- `basekit.tcache`: `TCache`, a magazine-based item cache over any backing
  allocator (`alloc(nr)` returning a list, `free(items)`), with per-thread
  `TCacheHandle`s from `handle()`, `reclaim()`, `usage()`, and a
  module-level `usage_report()` listing every live cache.
- `basekit.mempool`: `Mempool(length, pgsize, item_len)`, a pool of items
  that never cross a page boundary. Items are byte offsets into the pool's
  `buffer`; `view(item)` gives their bytes. `create_tcache` puts a `TCache`
  in front of it.
- `basekit.stat`: `StatEntry(name, source)` and a bounded
  `StatRegistry(limit)` with `register` (raises `OSError` with `ENOSPC`
  when full), `unregister`, `collect_all` and `format_all`.
- `basekit.init`: `Initializer` runs registered handlers for the levels
  `EARLY`, `NORMAL`, `LATE` (`base_init`) and `THREAD` (`thread_init`,
  which returns a per-thread id), stopping with `InitError` at the first
  handler that returns a non-zero code.

## Examples

```python
from basekit.bitmap import Bitmap
from basekit.checksum import chksum_internet
from basekit.hashing import jenkins_hash, hash_city_one
from basekit.pci import PciAddr

bits = Bitmap(128, False)
bits.set(3)
bits.set(70)
print(list(bits.iter_set()))        # [3, 70]
print(bits.find_next_cleared(3))    # 4

print(hex(chksum_internet(b"\x45\x00\x00\x1c")))
print(hex(jenkins_hash(b"hello")))
print(hex(hash_city_one(42)))

print(PciAddr.parse("0000:03:00.1"))  # 0000:03:00.1
```

A pool with a per-thread cache in front of it:

```python
from basekit.mempool import Mempool

pool = Mempool(2 * 4096, 4096, 64)
handle = pool.create_tcache("pool", 8).handle()
item = handle.alloc()
pool.view(item)[:5] = b"hello"
handle.free(item)
```

Counters and staged initialization:

```python
from basekit.stat import StatEntry, StatRegistry
from basekit.init import EARLY, Initializer

stats = StatRegistry(16)
stats.register(StatEntry("rx_packets", lambda: 5))
print(stats.collect_all())          # [('rx_packets', 5)]

init = Initializer()
init.register(EARLY, "setup", lambda: 0)
init.base_init()
print(init.base_init_done)          # True
```

Reading topology from a sysfs tree (the real one, or a copy for testing):

```python
from basekit.cpu import scan_topology

topo = scan_topology("/sys/devices/system", 64, 4)
print(topo.cpu_count, "cpus,", topo.numa_count, "nodes")
```

## What it does not do

- It maps no memory: `Mempool` hands out offsets into a `bytearray`, and
  there is no page or slab allocator, huge-page or shared-memory support.
- `PciDev.resource_path` only names the file for a BAR; nothing opens or
  maps it.
- There is no network stack, thread runtime or command-line tool; the
  package is a library only.

## Running the tests

```
pip install -e ".[test]"
pytest
```
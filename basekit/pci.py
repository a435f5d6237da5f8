"""PCI device discovery from sysfs."""

from __future__ import annotations

import errno
import os
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from basekit.sysfs import SysfsError, parse_val

SYSFS_PCI_PATH = "/sys/bus/pci/devices"
PCI_MAX_BARS = 6

PCI_BAR_IO = 0x00000100
PCI_BAR_MEM = 0x00000200
PCI_BAR_PREFETCH = 0x00002000
PCI_BAR_READONLY = 0x00004000

_U64 = (1 << 64) - 1
_ADDR_RE = re.compile(
    r"\s*([0-9a-fA-F]{1,4}):([0-9a-fA-F]{1,2}):([0-9a-fA-F]{1,2})\.([+-]?\d+)"
)


@dataclass(frozen=True)
class PciAddr:
    """A PCI address: domain, bus, slot and function."""

    domain: int
    bus: int
    slot: int
    func: int

    @classmethod
    def parse(cls, text: str) -> "PciAddr":
        """Parse ``DDDD:BB:SS.f`` (hex domain, bus, slot; decimal function)."""
        m = _ADDR_RE.match(text)
        if m is None:
            raise ValueError(f"invalid PCI address: {text!r}")
        return cls(
            domain=int(m.group(1), 16),
            bus=int(m.group(2), 16),
            slot=int(m.group(3), 16),
            func=int(m.group(4)) & 0xFF,
        )

    def __str__(self) -> str:
        return f"{self.domain:04x}:{self.bus:02x}:{self.slot:02x}.{self.func}"


@dataclass(frozen=True)
class PciBar:
    """One base address register."""

    start: int
    length: int
    flags: int


@dataclass(frozen=True)
class PciDev:
    """A PCI device as described by sysfs."""

    addr: PciAddr
    vendor_id: int
    device_id: int
    subsystem_vendor_id: int
    subsystem_device_id: int
    numa_node: int
    max_vfs: int
    bars: Tuple[PciBar, ...]
    root: str = SYSFS_PCI_PATH

    @classmethod
    def scan(cls, addr: PciAddr, root: str = SYSFS_PCI_PATH) -> "PciDev":
        """Read the device at ``addr`` from the sysfs tree under ``root``."""
        root = str(root)
        dir_path = os.path.join(root, str(addr))

        def field(name: str) -> int:
            return parse_val(os.path.join(dir_path, name)) & 0xFFFF

        numa_path = os.path.join(dir_path, "numa_node")
        if os.access(numa_path, os.R_OK):
            raw = parse_val(numa_path) & 0xFFFFFFFF
            numa_node = raw - (1 << 32) if raw & 0x80000000 else raw
        else:
            numa_node = -1

        vfs_path = os.path.join(dir_path, "max_vfs")
        max_vfs = field("max_vfs") if os.access(vfs_path, os.R_OK) else 0

        return cls(
            addr=addr,
            vendor_id=field("vendor"),
            device_id=field("device"),
            subsystem_vendor_id=field("subsystem_vendor"),
            subsystem_device_id=field("subsystem_device"),
            numa_node=numa_node,
            max_vfs=max_vfs,
            bars=_scan_resources(os.path.join(dir_path, "resource")),
            root=root,
        )

    def find_mem_bar(self, count: int = 0) -> Optional[PciBar]:
        """Return the memory BAR after skipping ``count`` earlier ones, or None."""
        for bar in self.bars:
            if not bar.flags & PCI_BAR_MEM:
                continue
            if not count:
                return bar
            count -= 1
        return None

    def resource_path(self, bar: PciBar, wc: bool = False) -> str:
        """Return the sysfs file that maps ``bar`` (write-combining if ``wc``)."""
        if bar.flags & PCI_BAR_READONLY:
            raise ValueError("BAR is read-only")
        if bar.length == 0:
            raise ValueError("BAR is empty")
        idx = next((i for i, b in enumerate(self.bars) if b is bar), None)
        if idx is None:
            raise ValueError("BAR does not belong to this device")
        if wc and not bar.flags & PCI_BAR_PREFETCH:
            raise ValueError("write-combining needs a prefetchable BAR")
        suffix = "_wc" if wc else ""
        return os.path.join(self.root, str(self.addr), f"resource{idx}{suffix}")


def _scan_resources(path: str) -> Tuple[PciBar, ...]:
    try:
        with open(path, encoding="ascii", errors="replace") as f:
            lines = [f.readline() for _ in range(PCI_MAX_BARS)]
    except OSError as exc:
        raise SysfsError(errno.EIO, "cannot read resources", path) from exc
    bars = []
    for line in lines:
        if not line:
            raise SysfsError(errno.EIO, "too few resource lines", path)
        parts = line.split()
        try:
            start, end, flags = (int(p, 16) for p in parts[:3])
        except ValueError as exc:
            raise SysfsError(errno.EINVAL, "malformed resource line", path) from exc
        bars.append(PciBar(start=start, length=(end - start + 1) & _U64, flags=flags))
    return tuple(bars)
"""Scanning of CPU and NUMA topology from sysfs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from basekit.bitmap import Bitmap
from basekit.sysfs import parse_bitlist, parse_val

NCPU = 256
NNUMA = 4
UINT_MAX = 0xFFFFFFFF
SYSFS_SYSTEM_PATH = "/sys/devices/system"


@dataclass(frozen=True)
class CpuInfo:
    """Topology details for one CPU."""

    package: int
    core_siblings: Bitmap
    thread_siblings: Bitmap


@dataclass(frozen=True)
class Topology:
    """Detected CPUs and NUMA nodes."""

    cpu_count: int
    numa_count: int
    cpus: Tuple[CpuInfo, ...]


def _count_contiguous(mask: Bitmap, what: str) -> int:
    count = 0
    for i in mask.iter_set():
        count += 1
        if count <= i:
            raise ValueError(f"cpu: can't support non-contiguous {what} mask")
    return count


def scan_topology(
    root: str = SYSFS_SYSTEM_PATH, max_cpus: int = NCPU, max_nodes: int = NNUMA
) -> Topology:
    """Read the online NUMA nodes, CPUs and per-CPU topology under ``root``."""
    numa_mask = parse_bitlist(os.path.join(root, "node", "online"), max_nodes)
    numa_count = _count_contiguous(numa_mask, "NUMA")
    if numa_count <= 0 or numa_count > max_nodes:
        raise ValueError(f"cpu: detected {numa_count} NUMA nodes, unsupported count")

    cpu_mask = parse_bitlist(os.path.join(root, "cpu", "online"), max_cpus)
    cpu_count = _count_contiguous(cpu_mask, "CPU")
    if cpu_count <= 0 or cpu_count > max_cpus:
        raise ValueError(f"cpu: detected {cpu_count} CPUs, unsupported count")

    cpus = []
    for i in range(cpu_count):
        topo = os.path.join(root, "cpu", f"cpu{i}", "topology")
        package = parse_val(os.path.join(topo, "physical_package_id"))
        if package > UINT_MAX:
            raise ValueError(f"cpu: package id {package} out of range")
        cpus.append(
            CpuInfo(
                package=package,
                core_siblings=parse_bitlist(
                    os.path.join(topo, "core_siblings_list"), cpu_count
                ),
                thread_siblings=parse_bitlist(
                    os.path.join(topo, "thread_siblings_list"), cpu_count
                ),
            )
        )
    return Topology(cpu_count=cpu_count, numa_count=numa_count, cpus=tuple(cpus))
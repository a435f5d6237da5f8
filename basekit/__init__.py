"""Systems utilities: bitmaps, checksums, hashes, sysfs and PCI scanning, logging, caches, pools, stats and init."""

__version__ = "0.1.0"

__all__ = [
    "bitmap",
    "checksum",
    "cpu",
    "hashing",
    "init",
    "log",
    "mempool",
    "pci",
    "stat",
    "sysfs",
    "tcache",
    "util",
]
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "basekit"
version = "0.1.0"
description = "Low-level systems utilities: bitmaps, checksums, hashes, sysfs topology, PCI scanning, logging, item caches, pools and statistics"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bitmap",
    "checksum",
    "jenkins",
    "cityhash",
    "crc32c",
    "sysfs",
    "pci",
    "tcache",
    "mempool",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["basekit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"

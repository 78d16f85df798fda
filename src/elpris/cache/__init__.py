"""Price caching: in-memory tier, pluggable disk tier, factory."""

from elpris.cache.disk import (
    DiskCache,
    FileDiskCache,
    NullDiskCache,
    SqliteDiskCache,
    create_disk_cache,
)
from elpris.cache.store import CacheStore

__all__ = [
    "CacheStore",
    "DiskCache",
    "FileDiskCache",
    "NullDiskCache",
    "SqliteDiskCache",
    "create_disk_cache",
]

"""spillcache: a bounded-memory map that spills least recently used entries to disk.

Typical use::

    from spillcache import FileBackedCache

    with FileBackedCache(memory_capacity=1000) as cache:
        cache["report"] = big_object
        ...
"""

from spillcache.domain.errors import (
    SpillCacheError,
    SpillStoreError,
    DirectoryCreateError,
    FileWriteError,
    FileReadError,
    DeserializeError,
    FileDeleteError,
    UnsupportedOperationError,
)
from spillcache.domain.models.common import CacheStats
from spillcache.infrastructure.cache.file_backed_cache import (
    FileBackedCache,
    DEFAULT_MEMORY_CAPACITY,
)

__version__ = "0.3.0"

__all__ = [
    'FileBackedCache',
    'DEFAULT_MEMORY_CAPACITY',
    'CacheStats',
    'SpillCacheError',
    'SpillStoreError',
    'DirectoryCreateError',
    'FileWriteError',
    'FileReadError',
    'DeserializeError',
    'FileDeleteError',
    'UnsupportedOperationError',
]

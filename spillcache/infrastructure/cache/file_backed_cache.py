"""Concrete implementation of the TieredCache interface.

Keeps up to `memory_capacity` entries in an LRU table in memory and spills the
least recently used ones to per-entry pickle files. Reading a spilled key
promotes it back into memory, which may in turn spill another key.

With the default capacity nothing is ever spilled, so the cache behaves as a
plain dict. That is useful when tuning how many entries fit in memory.
"""

import logging
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from spillcache.domain.errors import DeserializeError, FileReadError
from spillcache.domain.interfaces.cache import TieredCache
from spillcache.domain.models.common import CacheKey, CacheStats, PromotionCallback, ScratchDir
from spillcache.infrastructure.cache.recency_tracker import DEFAULT_MEMORY_CAPACITY, RecencyTracker
from spillcache.infrastructure.cache.spillover_store import DEFAULT_SCRATCH_PREFIX, SpilloverStore
from spillcache.infrastructure.config import settings

logger = logging.getLogger(__name__)

_MISSING = object()


class FileBackedCache(TieredCache):
    """Map with an LRU memory tier and a pickle-file disk tier.

    Not thread-safe: callers sharing an instance must serialize every call,
    reads included, since a read can move entries between tiers.
    """

    def __init__(
        self,
        memory_capacity: int = DEFAULT_MEMORY_CAPACITY,
        on_promote: Optional[PromotionCallback] = None,
        *,
        scratch_parent: Optional[Union[str, Path]] = None,
        scratch_prefix: str = DEFAULT_SCRATCH_PREFIX,
    ):
        """Initializes an empty cache.

        Args:
            memory_capacity: Maximum number of entries kept in memory.
            on_promote: Called as on_promote(key, value) each time a spilled
                entry is read back into memory.
            scratch_parent: Where to create the scratch directory
                (system temp directory if None).
            scratch_prefix: Name prefix of the scratch directory.
        """
        self._cold = SpilloverStore(scratch_parent=scratch_parent, scratch_prefix=scratch_prefix)
        self._hot = RecencyTracker(spill=self._spill, capacity=memory_capacity)
        self._on_promote = on_promote
        self._stats = CacheStats()
        logger.debug(f"FileBackedCache initialized (memory_capacity={memory_capacity})")

    @classmethod
    def from_config(cls, on_promote: Optional[PromotionCallback] = None) -> "FileBackedCache":
        """Builds a cache from the loaded configuration (see settings.py)."""
        return cls(
            memory_capacity=settings.get_memory_capacity(),
            on_promote=on_promote,
            scratch_parent=settings.get_scratch_parent(),
            scratch_prefix=settings.get_scratch_prefix(),
        )

    # --- Eviction ---

    def _spill(self, key: CacheKey, value: Any) -> None:
        self._cold.persist(key, value)
        self._stats.evictions += 1

    # --- Reads ---

    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Returns the value for key, promoting it into memory if it was spilled.

        Returns default if the key is in neither tier.
        """
        value = self._lookup(key)
        return default if value is _MISSING else value

    def __getitem__(self, key: CacheKey) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def _lookup(self, key: CacheKey) -> Any:
        if key in self._hot:
            self._stats.hits += 1
            return self._hot.get(key)
        if key not in self._cold:
            self._stats.misses += 1
            return _MISSING
        return self._promote(key)

    def _promote(self, key: CacheKey) -> Any:
        # Failures before the hot insert leave the entry cold and untouched
        value = self._cold.retrieve(key)
        self._hot.put(key, value)
        try:
            self._cold.evict(key)
        except Exception:
            self._hot.pop(key)
            raise
        self._stats.promotions += 1
        logger.debug(f"Promoted key {key!r} back into memory")

        if self._on_promote is not None:
            self._on_promote(key, value)
        return value

    # --- Writes ---

    def put(self, key: CacheKey, value: Any) -> Optional[Any]:
        """Stores value in memory as the most recently used entry.

        If key was spilled, its old value is read back to be returned and its
        file is deleted; the promotion observer is not called. A spilled value
        that can no longer be read is discarded with a warning and None is
        returned in its place.

        Returns:
            The previous value for key, or None.
        """
        if key in self._cold:
            return self._replace_cold(key, value)
        return self._hot.put(key, value)

    def _read_discardable(self, key: CacheKey) -> Optional[Any]:
        # Used where the cold copy is about to be dropped anyway
        try:
            return self._cold.retrieve(key)
        except (FileReadError, DeserializeError) as e:
            logger.warning(f"Discarding unreadable spilled value for key {key!r}: {e}")
            return None

    def _replace_cold(self, key: CacheKey, value: Any) -> Any:
        previous = self._read_discardable(key)
        self._hot.put(key, value)
        try:
            self._cold.evict(key)
        except Exception:
            self._hot.pop(key)
            raise
        return previous

    def remove(self, key: CacheKey) -> Optional[Any]:
        """Removes key from whichever tier holds it and returns its value.

        A spilled value that can no longer be read is still removed; None is
        returned for it.
        """
        if key in self._hot:
            return self._hot.pop(key)
        if key in self._cold:
            value = self._read_discardable(key)
            self._cold.evict(key)
            return value
        return None

    def pop(self, key: CacheKey, default: Any = _MISSING) -> Any:
        if key not in self:
            if default is _MISSING:
                raise KeyError(key)
            return default
        return self.remove(key)

    def clear(self) -> None:
        """Drops every entry and deletes the scratch directory.

        Afterwards the cache is indistinguishable from a new one and will
        create a fresh scratch directory on its next spill.
        """
        self._hot.clear()
        self._cold.clear()
        self._stats.reset()
        logger.info("Cleared cache (memory and scratch directory)")

    # --- Introspection ---

    def key_set(self) -> frozenset:
        return frozenset(self._hot.keys()) | frozenset(self._cold.keys())

    def hot_keys(self) -> List[Any]:
        """Keys held in memory, least recently used first."""
        return self._hot.keys()

    def cold_keys(self) -> List[Any]:
        """Keys held only on disk, in spill order."""
        return self._cold.keys()

    @property
    def memory_capacity(self) -> int:
        return self._hot.capacity

    @property
    def scratch_dir(self) -> Optional[ScratchDir]:
        return self._cold.scratch_dir

    @property
    def stats(self) -> CacheStats:
        s = self._stats
        return CacheStats(hits=s.hits, misses=s.misses, evictions=s.evictions, promotions=s.promotions)

    def __contains__(self, key: object) -> bool:
        return key in self._hot or key in self._cold

    def __len__(self) -> int:
        return len(self._hot) + len(self._cold)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._hot.keys() + self._cold.keys())

    def __repr__(self) -> str:
        capacity = "unbounded" if self.memory_capacity == DEFAULT_MEMORY_CAPACITY else self.memory_capacity
        return (
            f"{type(self).__name__}(hot={len(self._hot)}, cold={len(self._cold)}, "
            f"memory_capacity={capacity})"
        )

"""In-memory LRU tier of the tiered cache.

Keeps hot entries in an OrderedDict ordered from least to most recently used
and hands the least recently used entry to a spill callback whenever an
insertion grows the table past its capacity.
"""

import collections
import logging
import sys
from typing import Any, Callable, Iterator, List, Optional

from spillcache.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_CAPACITY = sys.maxsize  # In effect never spills

SpillCallback = Callable[[Any, Any], None]


class RecencyTracker:
    """Bounded LRU table that evicts into a spill callback."""

    def __init__(self, spill: SpillCallback, capacity: int = DEFAULT_MEMORY_CAPACITY):
        """Initializes the tracker.

        Args:
            spill: Called as spill(key, value) with the least recently used
                entry when the table grows past capacity. The entry leaves the
                table only after the call returns.
            capacity: Maximum number of hot entries.
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError(f"capacity must be an int, got {type(capacity).__name__}")
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._spill = spill
        self._capacity = capacity
        self._table: "collections.OrderedDict[Any, Any]" = collections.OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: CacheKey) -> Optional[Any]:
        """Returns the hot value for key and marks it most recently used, or None."""
        if key not in self._table:
            return None
        self._table.move_to_end(key)
        return self._table[key]

    def put(self, key: CacheKey, value: Any) -> Optional[Any]:
        """Inserts or overwrites key as the most recently used entry.

        If the insertion pushes the table past capacity, the least recently used
        entry is spilled. Should the spill fail, the insertion is undone before
        the error propagates, so the table is left as it was.

        Returns:
            The previous hot value for key, or None.
        """
        previous = self._table.pop(key, None)
        self._table[key] = value
        if len(self._table) > self._capacity:
            try:
                self._evict_eldest()
            except Exception:
                # Only a new key can grow the table, so undoing means dropping it
                del self._table[key]
                raise
        return previous

    def _evict_eldest(self) -> None:
        eldest_key, eldest_value = next(iter(self._table.items()))
        self._spill(eldest_key, eldest_value)
        del self._table[eldest_key]
        logger.debug(f"Evicted least recently used key {eldest_key!r} from memory")

    def pop(self, key: CacheKey, default: Any = None) -> Any:
        return self._table.pop(key, default)

    def keys(self) -> List[Any]:
        """Hot keys, least recently used first."""
        return list(self._table)

    def clear(self) -> None:
        self._table.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._table))

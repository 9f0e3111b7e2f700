"""Interface for tiered (memory + disk) caches.

Defines the map contract shared by every cache that keeps a bounded number of
entries in memory and spills the rest to durable storage. Operations that
would have to load every spilled entry are part of the contract only as
documented failures.
"""

import abc
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

from spillcache.domain.errors import UnsupportedOperationError
from spillcache.domain.models.common import CacheKey, CacheStats


class TieredCache(MutableMapping):
    """Abstract Base Class for a map split across a hot and a cold tier."""

    @abc.abstractmethod
    def put(self, key: CacheKey, value: Any) -> Optional[Any]:
        """Stores a value in the hot tier.

        Args:
            key: The key to store the value under.
            value: The value to store.

        Returns:
            The value previously stored under key, or None.
        """
        pass

    @abc.abstractmethod
    def remove(self, key: CacheKey) -> Optional[Any]:
        """Removes a key from whichever tier holds it.

        Args:
            key: The key to remove.

        Returns:
            The removed value, or None if the key was unknown.
        """
        pass

    @abc.abstractmethod
    def key_set(self) -> frozenset:
        """Returns every key held in either tier."""
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes all entries and releases any on-disk storage."""
        pass

    @abc.abstractmethod
    def hot_keys(self) -> List[Any]:
        """Returns the keys held in memory, least recently used first."""
        pass

    @abc.abstractmethod
    def cold_keys(self) -> List[Any]:
        """Returns the keys held only on disk."""
        pass

    @property
    @abc.abstractmethod
    def scratch_dir(self) -> Optional[Path]:
        """Returns the directory holding spilled entries, or None if there is none."""
        pass

    @property
    @abc.abstractmethod
    def stats(self) -> CacheStats:
        """Returns a snapshot of the hit/miss/eviction/promotion counters."""
        pass

    def __enter__(self) -> "TieredCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    # --- Map contract expressed through the abstract operations ---

    def size(self) -> int:
        return len(self)

    def is_empty(self) -> bool:
        return len(self) == 0

    def contains_key(self, key: CacheKey) -> bool:
        return key in self

    def put_all(self, entries: Union[Mapping, Iterable[Tuple[Any, Any]]]) -> None:
        """Stores every (key, value) pair, in iteration order."""
        items = entries.items() if isinstance(entries, Mapping) else entries
        for key, value in items:
            self.put(key, value)

    def __setitem__(self, key: CacheKey, value: Any) -> None:
        self.put(key, value)

    def __delitem__(self, key: CacheKey) -> None:
        if key not in self:
            raise KeyError(key)
        self.remove(key)

    # --- Deliberately unsupported views ---

    def contains_value(self, value: Any) -> bool:
        raise UnsupportedOperationError("contains_value")

    def values(self):
        raise UnsupportedOperationError("values")

    def items(self):
        raise UnsupportedOperationError("items")

    def __eq__(self, other: Any) -> bool:
        # Mapping equality compares items(), which would load every cold entry
        return self is other

    __hash__ = object.__hash__

"""Defines common Value Objects used across the cache.

These objects represent simple values or concepts like the on-disk handle
of a cold entry or the promotion observer signature, ensuring consistency
and type safety.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Hashable, NewType

# === Core Value Objects ===

CacheKey = Hashable                              # Any hashable identifier
SpillHandle = NewType("SpillHandle", Path)       # File holding one cold entry's pickled value
ScratchDir = NewType("ScratchDir", Path)         # Instance-owned directory for spill files

# Called as observer(key, value) each time a cold entry is promoted back to memory
PromotionCallback = Callable[[Any, Any], None]


@dataclass
class CacheStats:
    """Counters for capacity tuning.

    hits: reads served from memory.
    misses: reads for keys held in neither tier.
    evictions: entries moved from memory to disk.
    promotions: entries moved from disk back to memory by a read.
    """
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    promotions: int = 0

    @property
    def reads(self) -> int:
        return self.hits + self.misses + self.promotions

    @property
    def hit_ratio(self) -> float:
        """Fraction of reads served without touching disk (0.0 when nothing was read)."""
        total = self.reads
        return self.hits / total if total else 0.0

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.promotions = 0

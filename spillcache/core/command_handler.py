"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), builds caches through
the injected factory, drives them, and reports through the UserInterface.
"""

import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

from spillcache.domain.interfaces.cache import TieredCache
from spillcache.domain.interfaces.user_interface import UserInterface
from spillcache.domain.models.common import PromotionCallback

logger = logging.getLogger(__name__)

# Builds a cache: factory(memory_capacity, on_promote)
CacheFactory = Callable[[int, Optional[PromotionCallback]], TieredCache]

NUMBER_WORDS = ("zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten")
READ_ORDERS = ("forward", "reverse", "random")


def number_word(n: int) -> str:
    return NUMBER_WORDS[n] if 0 <= n < len(NUMBER_WORDS) else f"value-{n}"


class CommandHandler:
    """Handles incoming commands and delegates to caches built by the factory."""

    def __init__(
        self,
        cache_factory: CacheFactory,
        ui: UserInterface,
        config_provider: Optional[Callable[[], Dict[str, Any]]] = None,
    ):
        """Initializes the CommandHandler.

        Args:
            cache_factory: Builds the cache each command works on.
            ui: Where results and errors are shown.
            config_provider: Returns the effective configuration for 'info'.
        """
        self.cache_factory = cache_factory
        self.ui = ui
        self.config_provider = config_provider

    def handle_demo(self, capacity: int = 3, count: int = 5) -> int:
        """Puts keys 1..count, then reads them back newest first, showing each promotion."""
        logger.info(f"Running demo with capacity={capacity}, count={count}")
        promoted: List[Any] = []
        try:
            with self.cache_factory(capacity, lambda key, value: promoted.append(key)) as cache:
                for n in range(1, count + 1):
                    cache.put(n, number_word(n))
                self.ui.display_info(
                    f"Stored {count} entries with memory capacity {capacity}: "
                    f"{len(cache.hot_keys())} in memory, {len(cache.cold_keys())} spilled to disk."
                )

                rows = []
                for n in range(count, 0, -1):
                    was_cold = n not in cache.hot_keys()
                    value = cache.get(n)
                    rows.append((n, value, "disk" if was_cold else "memory"))
                self.ui.display_table("Reads (newest first)", ["Key", "Value", "Served from"], rows)
                self.ui.display_output(f"Promotions observed: {len(promoted)} ({', '.join(map(str, promoted)) or 'none'})")
        except Exception as e:
            logger.error(f"Demo command failed: {e}", exc_info=True)
            self.ui.display_error(f"Demo failed: {e}")
            return 1
        return 0

    def handle_tune(
        self,
        capacity: int,
        count: int,
        value_size: int = 1024,
        order: str = "reverse",
        seed: Optional[int] = None,
    ) -> int:
        """Fills a cache with count payloads of value_size bytes, reads them back and reports the stats."""
        if order not in READ_ORDERS:
            self.ui.display_error(f"Unknown read order '{order}'. Choose one of: {', '.join(READ_ORDERS)}.")
            return 1

        logger.info(f"Running tune with capacity={capacity}, count={count}, value_size={value_size}, order={order}")
        rng = random.Random(seed)
        try:
            with self.cache_factory(capacity, None) as cache:
                started = time.perf_counter()
                for n in range(count):
                    cache.put(n, rng.randbytes(value_size))
                write_secs = time.perf_counter() - started

                scratch_dir = cache.scratch_dir
                spill_files = len(list(scratch_dir.iterdir())) if scratch_dir else 0

                keys = list(range(count))
                if order == "reverse":
                    keys.reverse()
                elif order == "random":
                    rng.shuffle(keys)

                started = time.perf_counter()
                for key in keys:
                    cache.get(key)
                read_secs = time.perf_counter() - started

                stats = cache.stats
                self.ui.display_table(
                    "Tuning report",
                    ["Metric", "Value"],
                    [
                        ("Entries", count),
                        ("Memory capacity", capacity),
                        ("Value size (bytes)", value_size),
                        ("Spill files after writes", spill_files),
                        ("Hits", stats.hits),
                        ("Promotions", stats.promotions),
                        ("Evictions", stats.evictions),
                        ("Hit ratio", f"{stats.hit_ratio:.2%}"),
                        ("Write time (s)", f"{write_secs:.4f}"),
                        ("Read time (s)", f"{read_secs:.4f}"),
                    ],
                )
        except Exception as e:
            logger.error(f"Tune command failed: {e}", exc_info=True)
            self.ui.display_error(f"Tune failed: {e}")
            return 1
        return 0

    def handle_info(self) -> int:
        """Shows the configuration a cache built from settings would use."""
        if self.config_provider is None:
            self.ui.display_warning("No configuration provider available.")
            return 1
        try:
            self.ui.display_mapping("Effective configuration", self.config_provider())
        except Exception as e:
            logger.error(f"Info command failed: {e}", exc_info=True)
            self.ui.display_error(f"Could not read configuration: {e}")
            return 1
        return 0

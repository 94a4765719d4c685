"""
TTL-bounded cache for catalog-size queries.

Entries are keyed by (store_id, kind) and expire logically: a read older
than the TTL is a miss, but the entry stays in place until the next
recomputation overwrites it.

Concurrent misses on the same key may each fetch and write; the last write
wins. All such writes carry equally fresh data, so no single-flight
deduplication is attempted. The lock only protects the mapping itself.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

import structlog

from salespulse.models.enums import ProductCountKind

logger = structlog.get_logger(__name__)

DEFAULT_TTL_MILLIS = 60_000

CacheKey = tuple[str, ProductCountKind]


@dataclass(frozen=True)
class CacheEntry:
    count: int
    timestamp: float


class CountCache:
    """
    Process-wide cache of catalog counts with an injectable clock.

    Attributes:
        ttl: Maximum entry age in seconds
        clock: Zero-argument callable returning the current time in seconds

    Example:
        >>> cache = CountCache(ttl_millis=60_000)
        >>> cache.put(("store_1", ProductCountKind.TOTAL), 42)
        >>> cache.get(("store_1", ProductCountKind.TOTAL))
        42
    """

    def __init__(
        self,
        ttl_millis: int = DEFAULT_TTL_MILLIS,
        clock: Optional[Callable[[], float]] = None,
    ):
        if ttl_millis <= 0:
            raise ValueError("ttl_millis must be positive")
        self.ttl = ttl_millis / 1000.0
        self.clock = clock or time.monotonic
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[int]:
        """Return the cached count, or None when absent or older than the TTL."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.timestamp < self.ttl:
            return entry.count
        logger.debug("count_cache_expired", store_id=key[0], kind=key[1].value)
        return None

    def put(self, key: CacheKey, count: int) -> None:
        """Store a freshly fetched count, overwriting any previous entry."""
        entry = CacheEntry(count=count, timestamp=self.clock())
        with self._lock:
            self._entries[key] = entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

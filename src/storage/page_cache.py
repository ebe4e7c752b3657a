# src/storage/page_cache.py

"""In-memory page data store with a revalidation window."""

import logging
import time
from dataclasses import dataclass
from typing import Any

from src.config.settings import Settings

logger = logging.getLogger("storefront.cache")


@dataclass
class CacheEntry:
    """Rendered page data and the time it was generated."""

    key: str
    value: Any
    timestamp: float


class PageCache:
    """Keeps page data for ``REVALIDATE_SECONDS`` before regeneration.

    Expired entries are not evicted: they stay available through
    :meth:`get_stale` so a failed regeneration can keep serving the
    last good page.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._ttl: float = (
            float(Settings.REVALIDATE_SECONDS) if ttl is None else ttl
        )

    def get(self, key: str) -> Any | None:
        """Return the entry for ``key`` if it is still fresh."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        age = time.time() - entry.timestamp
        if age >= self._ttl:
            logger.debug(
                "Entry '%s' expired (age %.0fs, ttl %.0fs)",
                key,
                age,
                self._ttl,
            )
            return None
        logger.debug("Cache hit for '%s'", key)
        return entry.value

    def get_stale(self, key: str) -> Any | None:
        """Return the entry for ``key`` regardless of age."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def store(self, key: str, value: Any) -> None:
        """Record freshly generated page data."""
        self._entries[key] = CacheEntry(
            key=key, value=value, timestamp=time.time()
        )
        logger.debug("Cached page data for '%s'", key)

    def clear(self) -> int:
        """Purge all entries.

        Returns the number of entries that were removed.
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("Page cache purged (%d entries removed)", count)
        return count

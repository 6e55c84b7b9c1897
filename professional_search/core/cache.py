"""In-memory result cache with lazy expiry."""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from professional_search.models import CategoryResult

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 30 * 60 * 1000


@dataclass(frozen=True, slots=True)
class CacheEntry:
    expires_at_ms: float
    results: Tuple[CategoryResult, ...]


class SearchCache:
    """Keyed store of aggregated results.

    Entries are never evicted; an expired entry is ignored on read and
    replaced by the next write for the same key.
    """

    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS) -> None:
        self.ttl_ms = ttl_ms
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str, now_ms: float) -> Optional[Tuple[CategoryResult, ...]]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.expires_at_ms <= now_ms:
            return None
        return entry.results

    def set(self, key: str, results: Iterable[CategoryResult], now_ms: float) -> CacheEntry:
        entry = CacheEntry(expires_at_ms=now_ms + self.ttl_ms, results=tuple(results))
        with self._lock:
            self._entries[key] = entry
        logger.debug("Cached %d category results for key=%s", len(entry.results), key)
        return entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

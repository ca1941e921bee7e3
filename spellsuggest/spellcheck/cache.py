from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Hashable

from spellsuggest.common.config import settings
from spellsuggest.spellcheck.models import CacheEntryInfo, CacheStats, CorrectionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    query: str
    result: CorrectionResult
    created_at: float


class CorrectionCache:
    """TTL cache of correction results keyed by normalized query.

    Expiry is enforced on every read. Once the cache grows past
    ``sweep_threshold`` a write sweeps every expired entry, and entries beyond
    ``max_entries`` are evicted least-recently-used first.
    """

    def __init__(
        self,
        *,
        ttl_s: float = settings.cache_ttl_s,
        max_entries: int = settings.cache_max_entries,
        sweep_threshold: int = settings.cache_sweep_threshold,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_s = ttl_s
        self.max_entries = max(1, max_entries)
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self.ttl_s

    def get(self, key: Hashable) -> CorrectionResult | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry.result

    def set(self, key: Hashable, query: str, result: CorrectionResult) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(query=query, result=result, created_at=self._clock())
            self._entries.move_to_end(key)
            if len(self._entries) > self.sweep_threshold:
                self.sweep()
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("swept %d expired spellcheck cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            entries = [
                CacheEntryInfo(
                    query=entry.query,
                    suggestion=entry.result.suggestion,
                    confidence=entry.result.confidence,
                    correction_type=entry.result.correction_type,
                    age_s=now - entry.created_at,
                )
                for entry in self._entries.values()
            ]
        return CacheStats(size=len(entries), entries=entries)

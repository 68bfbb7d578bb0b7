"""
Process-lifetime cache in front of the fallback chain.

The cache owns the last successful live result. Stale and static-default
tiers are appended to the live tiers on every lookup, so the whole fallback
order is one FallbackChain.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .defaults import default_records
from .models import CacheStatus, CanonicalRecord
from .rules import CACHE_TTL_SECONDS
from .sources import FallbackChain, Tier

logger = logging.getLogger(__name__)

LIVE_STATUSES = (CacheStatus.MISS,)


@dataclass(frozen=True)
class CacheEntry:
    records: tuple[CanonicalRecord, ...]
    fetched_at: float


@dataclass(frozen=True)
class CacheLookup:
    records: List[CanonicalRecord]
    status: CacheStatus
    total: int

    @property
    def returned(self) -> int:
        return len(self.records)


class CatalogCache:
    def __init__(self, live_tiers: Sequence[Tier], ttl: float = CACHE_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.live_tiers = list(live_tiers)
        self.ttl = ttl
        self.clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    def clear(self) -> None:
        self._entry = None

    def is_fresh(self) -> bool:
        return self._entry is not None and (self.clock() - self._entry.fetched_at) < self.ttl

    def _stale_records(self) -> List[CanonicalRecord]:
        return list(self._entry.records) if self._entry is not None else []

    def chain(self) -> FallbackChain:
        return FallbackChain([
            *self.live_tiers,
            Tier("stale-cache", CacheStatus.STALE, self._stale_records),
            Tier("static-default", CacheStatus.FALLBACK, default_records),
        ])

    def get(self, bypass: bool = False, limit: Optional[int] = None) -> CacheLookup:
        """
        Return the catalog and how it was obtained.

        limit only truncates the returned slice; the stored entry is always
        the full record set.
        """
        if not bypass and self.is_fresh():
            return self._lookup(list(self._entry.records), CacheStatus.HIT, limit)

        outcome = self.chain().run()
        if outcome.status in LIVE_STATUSES:
            self._entry = CacheEntry(records=tuple(outcome.records), fetched_at=self.clock())
        else:
            logger.warning("Live sources failed; serving %s data", outcome.status.value)

        return self._lookup(outcome.records, outcome.status, limit)

    @staticmethod
    def _lookup(records: List[CanonicalRecord], status: CacheStatus,
                limit: Optional[int]) -> CacheLookup:
        total = len(records)
        if limit is not None:
            records = records[:limit]
        return CacheLookup(records=records, status=status, total=total)

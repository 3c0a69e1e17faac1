"""Transaction Cache: the two cache regions shared by every request in the process.

Invariants:
    - points holds id:<id> and ref:<reference> keys -> TransactionRecord | None
      (None is the explicit "absent" marker)
    - pages holds composite listing keys -> TransactionPage
    - The regions never share entries; invalidating one never touches the other
    - Capacity and TTL for both regions come from Settings

Design Decisions:
    - Constructed explicitly and passed to TransactionService (no global lookup),
      so tests build isolated instances with a fake clock
"""

import logging
import time
from typing import Callable

from txn_records.config import Settings
from txn_records.core.domain_types import CacheNamespace
from txn_records.infrastructure.cache_region import CacheRegion, CacheStats

logger = logging.getLogger(__name__)


class TransactionCache:
    """Point-lookup region plus listing-page region."""

    def __init__(self, points: CacheRegion, pages: CacheRegion):
        self.points = points
        self.pages = pages

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], float] = time.monotonic,
    ) -> "TransactionCache":
        return cls(
            points=CacheRegion(
                CacheNamespace.POINT.value,
                settings.cache_point_max_entries,
                settings.cache_point_ttl_seconds,
                clock,
            ),
            pages=CacheRegion(
                CacheNamespace.PAGE.value,
                settings.cache_page_max_entries,
                settings.cache_page_ttl_seconds,
                clock,
            ),
        )

    def region(self, namespace: CacheNamespace) -> CacheRegion:
        if namespace is CacheNamespace.POINT:
            return self.points
        return self.pages

    def invalidate_all(self, namespace: CacheNamespace) -> None:
        self.region(namespace).clear()
        logger.debug(
            "Cache namespace cleared", extra={"cache_region": namespace.value},
        )

    def clear(self) -> None:
        for namespace in CacheNamespace:
            self.invalidate_all(namespace)

    def stats(self) -> list[CacheStats]:
        return [self.points.stats(), self.pages.stats()]

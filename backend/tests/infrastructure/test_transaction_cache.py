"""Transaction Cache: region wiring from settings and namespace independence."""

from txn_records.config import Settings
from txn_records.core.domain_types import CacheNamespace
from txn_records.infrastructure.cache_region import MISSING
from txn_records.infrastructure.transaction_cache import TransactionCache


def _cache():
    return TransactionCache.from_settings(Settings(
        cache_point_max_entries=10,
        cache_point_ttl_seconds=60,
        cache_page_max_entries=5,
        cache_page_ttl_seconds=30,
    ))


def test_regions_built_from_settings():
    cache = _cache()
    assert cache.points.name == "transaction"
    assert cache.points.max_entries == 10
    assert cache.points.ttl_seconds == 60
    assert cache.pages.name == "transactions"
    assert cache.pages.max_entries == 5
    assert cache.pages.ttl_seconds == 30


def test_region_lookup_by_namespace():
    cache = _cache()
    assert cache.region(CacheNamespace.POINT) is cache.points
    assert cache.region(CacheNamespace.PAGE) is cache.pages


def test_invalidating_one_namespace_leaves_the_other():
    cache = _cache()
    cache.points.put("id:1", "record")
    cache.pages.put(("page",), "page")

    cache.invalidate_all(CacheNamespace.PAGE)

    assert cache.pages.get(("page",)) is MISSING
    assert cache.points.get("id:1") == "record"


def test_clear_empties_both():
    cache = _cache()
    cache.points.put("id:1", "record")
    cache.pages.put(("page",), "page")

    cache.clear()

    assert [s.size for s in cache.stats()] == [0, 0]

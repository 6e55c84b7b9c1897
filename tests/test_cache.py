from professional_search.core.cache import SearchCache
from professional_search.models import CategoryResult


def test_get_returns_live_entry():
    cache = SearchCache(ttl_ms=1000)
    results = [CategoryResult("fono", "Fonoaudiologo")]

    entry = cache.set("k", results, now_ms=0)

    assert entry.expires_at_ms == 1000
    assert cache.get("k", now_ms=999) == tuple(results)
    assert cache.get("missing", now_ms=0) is None


def test_expired_entry_is_ignored_and_replaced():
    cache = SearchCache(ttl_ms=1000)
    cache.set("k", [CategoryResult("fono", "Fonoaudiologo")], now_ms=0)

    assert cache.get("k", now_ms=1000) is None

    cache.set("k", [CategoryResult("to", "Terapeuta Ocupacional")], now_ms=1000)
    assert cache.get("k", now_ms=1500)[0].category_id == "to"
    assert len(cache) == 1


def test_entries_are_snapshots():
    cache = SearchCache()
    results = [CategoryResult("fono", "Fonoaudiologo")]
    cache.set("k", results, now_ms=0)
    results.append(CategoryResult("to", "Terapeuta Ocupacional"))

    assert len(cache.get("k", now_ms=1)) == 1

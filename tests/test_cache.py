from concurrent.futures import ThreadPoolExecutor

from swipewise.domain.models import ClassificationResult, ClassificationSource
from swipewise.nlp.cache import ClassificationCache


def _result(category: str) -> ClassificationResult:
    return ClassificationResult(category=category, confidence=0.8, source=ClassificationSource.KEYWORD)


def test_cache_evicts_oldest_insertion() -> None:
    cache = ClassificationCache(max_entries=2)
    cache.put("a", _result("Dining"))
    cache.put("b", _result("Travel"))
    cache.put("c", _result("Gas"))

    assert cache.get("a") is None
    assert cache.get("b").category == "Travel"
    assert len(cache) == 2


def test_cache_hit_is_tagged_and_does_not_mutate_entry() -> None:
    cache = ClassificationCache()
    original = _result("Dining")
    cache.put("Dinner Out", original)

    hit = cache.get("dinner out ")

    assert hit.source == ClassificationSource.CACHE
    assert original.source == ClassificationSource.KEYWORD


def test_cache_stays_bounded_under_concurrent_writers() -> None:
    cache = ClassificationCache(max_entries=50)

    def hammer(worker: int) -> None:
        for i in range(200):
            cache.put(f"purchase {worker}-{i}", _result("Dining"))
            cache.get(f"purchase {worker}-{i // 2}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(hammer, range(8)))

    assert len(cache) == 50
    assert cache.get("purchase 0-0") is None

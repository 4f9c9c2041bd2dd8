import time

import pytest

from swipewise.domain.models import ClassificationMethod, ClassificationResult, ClassificationSource
from swipewise.errors import ExternalServiceUnavailable
from swipewise.nlp.cache import ClassificationCache
from swipewise.nlp.classifier import CategoryClassifier
from swipewise.nlp.semantic import SemanticCategorizer
from swipewise.rag.retriever import ExemplarIndex


class FakeTier:
    def __init__(
        self, category, confidence, source=ClassificationSource.SEMANTIC, delay=0.0, error=None
    ):
        self.result = ClassificationResult(
            category=category, confidence=confidence, source=source, reasoning="fake"
        )
        self.delay = delay
        self.error = error
        self.calls = 0

    def categorize(self, description: str) -> ClassificationResult:
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.result


@pytest.mark.parametrize("description", [None, "", "   ", 42])
def test_invalid_input_degrades_to_other(description) -> None:
    with CategoryClassifier() as classifier:
        result = classifier.categorize(description)

    assert result.category == "Other"
    assert result.confidence <= 0.2
    assert result.source == ClassificationSource.FALLBACK


def test_confident_keyword_result_skips_remote_tiers() -> None:
    semantic = FakeTier("Dining", 0.95)
    with CategoryClassifier(semantic=semantic) as classifier:
        result = classifier.categorize("weekly groceries at whole foods")

    assert result.category == "Grocery"
    assert semantic.calls == 0


def test_final_confidence_is_max_across_tiers() -> None:
    semantic = FakeTier("Dining", 0.05)
    generative = FakeTier("Travel", 0.3, source=ClassificationSource.LLM)
    with CategoryClassifier(semantic=semantic, generative=generative) as classifier:
        result = classifier.categorize("xyzzy plugh")

    assert semantic.calls == 1
    assert generative.calls == 1
    assert result.category == "Travel"
    assert result.confidence == 0.3


def test_weaker_remote_answer_never_replaces_keyword_answer() -> None:
    generative = FakeTier("Travel", 0.05, source=ClassificationSource.LLM)
    with CategoryClassifier(generative=generative) as classifier:
        result = classifier.categorize("xyzzy plugh")

    assert result.category == "Other"
    assert result.confidence == 0.1


def test_timed_out_tier_is_skipped_and_not_cached() -> None:
    semantic = FakeTier("Dining", 0.9, delay=0.5)
    generative = FakeTier("Entertainment", 0.85, source=ClassificationSource.LLM)
    cache = ClassificationCache()
    with CategoryClassifier(
        semantic=semantic, generative=generative, cache=cache, semantic_timeout=0.05
    ) as classifier:
        result = classifier.categorize("xyzzy plugh")

    assert result.category == "Entertainment"
    assert len(cache) == 0


def test_failing_tier_keeps_best_so_far() -> None:
    generative = FakeTier(
        "Travel", 0.9, source=ClassificationSource.LLM, error=ExternalServiceUnavailable("down")
    )
    with CategoryClassifier(generative=generative) as classifier:
        result = classifier.categorize("xyzzy plugh")

    assert generative.calls == 1
    assert result.category == "Other"
    assert len(classifier.cache) == 0


def test_second_lookup_is_served_from_cache() -> None:
    generative = FakeTier("Travel", 0.7, source=ClassificationSource.LLM)
    with CategoryClassifier(generative=generative) as classifier:
        first = classifier.categorize("xyzzy plugh")
        second = classifier.categorize("  XYZZY plugh ")

    assert first.source == ClassificationSource.LLM
    assert second.source == ClassificationSource.CACHE
    assert second.category == "Travel"
    assert generative.calls == 1


def test_forced_tier_bypasses_cache() -> None:
    cache = ClassificationCache()
    cache.put(
        "bar tab",
        ClassificationResult(category="Travel", confidence=0.9, source=ClassificationSource.LLM),
    )
    with CategoryClassifier(cache=cache) as classifier:
        forced = classifier.categorize("bar tab", ClassificationMethod.KEYWORD)
        cached = classifier.categorize("bar tab")

    assert forced.category == "Dining"
    assert cached.source == ClassificationSource.CACHE


def test_forcing_unconfigured_tier_falls_back() -> None:
    with CategoryClassifier() as classifier:
        result = classifier.categorize("dinner downtown", ClassificationMethod.GENERATIVE)

    assert result.category == "Other"
    assert result.source == ClassificationSource.FALLBACK


def test_forced_semantic_tier_is_used_alone() -> None:
    semantic = FakeTier("Healthcare", 0.4)
    with CategoryClassifier(semantic=semantic) as classifier:
        result = classifier.categorize("weekly groceries at whole foods", "semantic")

    assert result.category == "Healthcare"
    assert len(classifier.cache) == 0


def test_batch_categorize_keeps_input_order() -> None:
    with CategoryClassifier() as classifier:
        results = classifier.batch_categorize(["weekly groceries at whole foods", "", "bar tab"])

    assert [r.category for r in results] == ["Grocery", "Other", "Dining"]
    assert results[1].source == ClassificationSource.FALLBACK


class FoodEmbedder:
    def embed(self, texts: list[str]) -> list[list[float]]:
        return [[1.0 if "dinner" in text else 0.0, 1.0 if "hotel" in text else 0.0] for text in texts]


def test_similar_examples_come_from_semantic_index() -> None:
    index = ExemplarIndex.build(
        FoodEmbedder(), {"Dining": [("dinner out", 1.0)], "Travel": [("hotel stay", 1.0)]}
    )
    with CategoryClassifier(semantic=SemanticCategorizer(index)) as classifier:
        similar = classifier.similar_examples("team dinner", limit=1)
        blank = classifier.similar_examples("  ")

    assert [(m.category, m.text) for m in similar] == [("Dining", "dinner out")]
    assert blank == []


def test_similar_examples_without_semantic_tier() -> None:
    with CategoryClassifier() as classifier:
        assert classifier.similar_examples("team dinner") == []

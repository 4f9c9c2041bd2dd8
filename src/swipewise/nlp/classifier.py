"""Cascading purchase-description classifier: keyword, then semantic, then generative."""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from swipewise.config import Settings
from swipewise.domain.models import (
    OTHER_CATEGORY,
    ClassificationMethod,
    ClassificationResult,
    ClassificationSource,
)
from swipewise.nlp.cache import ClassificationCache
from swipewise.nlp.keyword import classify_keywords
from swipewise.nlp.llm import GenerativeCategorizer, OpenAICategorizer, RateLimiter
from swipewise.nlp.semantic import SemanticCategorizer, VectorMatch

logger = logging.getLogger(__name__)


@dataclass
class Stage:
    method: ClassificationMethod
    run: Callable[[str], ClassificationResult]
    attempt_below: float
    timeout: float


def _fallback(reasoning: str) -> ClassificationResult:
    return ClassificationResult(
        category=OTHER_CATEGORY,
        confidence=0.1,
        source=ClassificationSource.FALLBACK,
        reasoning=reasoning,
    )


class CategoryClassifier:
    def __init__(
        self,
        semantic: SemanticCategorizer | None = None,
        generative: GenerativeCategorizer | None = None,
        cache: ClassificationCache | None = None,
        accept_confidence: float = 0.8,
        semantic_below: float = 0.7,
        llm_below: float = 0.6,
        semantic_timeout: float = 3.0,
        llm_timeout: float = 8.0,
        max_workers: int = 4,
    ):
        self.semantic = semantic
        self.generative = generative
        self.cache = cache if cache is not None else ClassificationCache()
        self.accept_confidence = accept_confidence
        self.semantic_below = semantic_below
        self.llm_below = llm_below
        self.semantic_timeout = semantic_timeout
        self.llm_timeout = llm_timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="classifier")

    def _remote_stages(self) -> list[Stage]:
        stages: list[Stage] = []
        if self.semantic is not None:
            stages.append(
                Stage(
                    ClassificationMethod.SEMANTIC,
                    self.semantic.categorize,
                    self.semantic_below,
                    self.semantic_timeout,
                )
            )
        if self.generative is not None:
            stages.append(
                Stage(
                    ClassificationMethod.GENERATIVE,
                    self.generative.categorize,
                    self.llm_below,
                    self.llm_timeout,
                )
            )
        return stages

    def _run_stage(self, stage: Stage, description: str) -> ClassificationResult | None:
        future = self._executor.submit(stage.run, description)
        try:
            return future.result(timeout=stage.timeout)
        except FutureTimeout:
            future.cancel()
            logger.warning("%s tier timed out after %.1fs", stage.method.value, stage.timeout)
        except Exception as exc:
            logger.warning("%s tier failed: %s", stage.method.value, exc)
        return None

    def categorize(
        self, description: object, forced_method: ClassificationMethod | None = None
    ) -> ClassificationResult:
        if not isinstance(description, str) or not description.strip():
            logger.info("Invalid description input: %s", type(description).__name__)
            return _fallback("Empty or non-text description")

        if forced_method is not None:
            return self._categorize_forced(description, ClassificationMethod(forced_method))

        cached = self.cache.get(description)
        if cached is not None:
            logger.debug("Cache hit for %r: %s", description, cached.category)
            return cached

        best = classify_keywords(description)
        logger.info(
            "Keyword result for %r: %s (%.2f)", description, best.category, best.confidence
        )
        if best.confidence >= self.accept_confidence:
            self.cache.put(description, best)
            return best

        complete = True
        for stage in self._remote_stages():
            if best.confidence >= stage.attempt_below:
                continue
            candidate = self._run_stage(stage, description)
            if candidate is None:
                complete = False
                continue
            logger.info(
                "%s result for %r: %s (%.2f)",
                stage.method.value,
                description,
                candidate.category,
                candidate.confidence,
            )
            if candidate.confidence > best.confidence:
                best = candidate

        # a failed tier may succeed next time, so only settled answers are cached
        if complete:
            self.cache.put(description, best)
        return best

    def batch_categorize(
        self, descriptions: list[object], forced_method: ClassificationMethod | None = None
    ) -> list[ClassificationResult]:
        return [self.categorize(description, forced_method) for description in descriptions]

    def similar_examples(self, description: str, limit: int = 5) -> list[VectorMatch]:
        if self.semantic is None or not isinstance(description, str) or not description.strip():
            return []
        return self.semantic.search.find_similar(description, limit)

    def _categorize_forced(
        self, description: str, method: ClassificationMethod
    ) -> ClassificationResult:
        if method is ClassificationMethod.KEYWORD:
            return classify_keywords(description)

        stage = next((s for s in self._remote_stages() if s.method is method), None)
        if stage is None:
            return _fallback(f"{method.value} tier is not configured")

        result = self._run_stage(stage, description)
        if result is None:
            return _fallback(f"{method.value} tier did not answer")
        return result

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "CategoryClassifier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def build_classifier(config: Settings) -> CategoryClassifier:
    from swipewise.rag.retriever import ExemplarIndex, OpenAIEmbedder

    semantic = None
    generative = None
    if config.openai_api_key:
        index_path = Path(config.exemplar_index_file)
        if index_path.exists():
            embedder = OpenAIEmbedder(
                api_key=config.openai_api_key,
                model=config.openai_embedding_model,
                timeout=config.semantic_timeout_seconds,
            )
            semantic = SemanticCategorizer(
                ExemplarIndex.load(index_path, embedder), top_k=config.semantic_top_k
            )
        else:
            logger.info("No exemplar index at %s, semantic tier disabled", index_path)

        generative = GenerativeCategorizer(
            OpenAICategorizer(
                api_key=config.openai_api_key,
                model=config.openai_model,
                timeout=config.llm_timeout_seconds,
            ),
            RateLimiter(
                min_interval=config.llm_min_interval_seconds,
                max_per_minute=config.llm_max_requests_per_minute,
            ),
        )
    else:
        logger.info("OPENAI_API_KEY not set, classifier runs keyword tier only")

    return CategoryClassifier(
        semantic=semantic,
        generative=generative,
        cache=ClassificationCache(config.classification_cache_size),
        accept_confidence=config.keyword_accept_confidence,
        semantic_below=config.semantic_below_confidence,
        llm_below=config.llm_below_confidence,
        semantic_timeout=config.semantic_timeout_seconds,
        llm_timeout=config.llm_timeout_seconds,
        max_workers=config.classifier_workers,
    )

import logging
from dataclasses import dataclass
from typing import Protocol

from swipewise.domain.models import OTHER_CATEGORY, ClassificationResult, ClassificationSource

logger = logging.getLogger(__name__)

MAX_SEMANTIC_CONFIDENCE = 0.95


@dataclass
class VectorMatch:
    category: str
    score: float
    text: str = ""
    weight: float = 1.0


class VectorSearch(Protocol):
    def query(self, text: str, top_k: int) -> list[VectorMatch]: ...

    def find_similar(self, text: str, limit: int = 5) -> list[VectorMatch]: ...


def similarity_to_confidence(similarity: float) -> float:
    """Map cosine similarity onto the classifier's confidence scale.

    Good matches typically land between 0.6 and 0.95, so the upper bands
    are stretched: >=0.85 maps to 0.9+, 0.7-0.85 maps to 0.7-0.9 and
    anything lower is taken as-is.
    """
    if similarity >= 0.85:
        confidence = 0.9 + (similarity - 0.85) * 0.67
    elif similarity >= 0.7:
        confidence = 0.7 + (similarity - 0.7) * 1.33
    else:
        confidence = similarity
    return max(0.0, min(confidence, MAX_SEMANTIC_CONFIDENCE))


def aggregate_by_category(matches: list[VectorMatch]) -> dict[str, float]:
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for match in matches:
        totals[match.category] = totals.get(match.category, 0.0) + match.score * match.weight
        counts[match.category] = counts.get(match.category, 0) + 1
    return {category: totals[category] / counts[category] for category in totals}


class SemanticCategorizer:
    def __init__(self, search: VectorSearch, top_k: int = 10):
        self.search = search
        self.top_k = top_k

    def categorize(self, description: str) -> ClassificationResult:
        matches = self.search.query(description, self.top_k)
        if not matches:
            return ClassificationResult(
                category=OTHER_CATEGORY,
                confidence=0.1,
                source=ClassificationSource.SEMANTIC,
                reasoning="No similar examples found",
            )

        scores = aggregate_by_category(matches)
        category, similarity = max(scores.items(), key=lambda item: item[1])
        example = next(m for m in matches if m.category == category)
        logger.debug("Semantic scores for %r: %s", description, scores)

        return ClassificationResult(
            category=category,
            confidence=round(similarity_to_confidence(similarity), 3),
            source=ClassificationSource.SEMANTIC,
            reasoning=f'Best match: "{example.text}" ({similarity:.3f} similarity)',
        )

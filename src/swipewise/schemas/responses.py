from pydantic import BaseModel

from swipewise.domain.models import CategorySpend, ClassificationResult, RankedCard


class RecommendResponse(BaseModel):
    category: str
    classification: ClassificationResult | None = None
    best_card: RankedCard
    ranked_cards: list[RankedCard]


class SpendingSummary(BaseModel):
    user_id: str
    year: int
    total_amount: float
    categories: list[CategorySpend]

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

WILDCARD_CATEGORY = "All"
OTHER_CATEGORY = "Other"


class CapPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ClassificationMethod(str, Enum):
    KEYWORD = "keyword"
    SEMANTIC = "semantic"
    GENERATIVE = "generative"


class ClassificationSource(str, Enum):
    KEYWORD = "keyword"
    MERCHANT = "merchant"
    SEMANTIC = "semantic"
    LLM = "llm"
    CACHE = "cache"
    FALLBACK = "fallback"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Reward(BaseModel):
    card_id: str | None = None
    category: str
    multiplier: float = Field(ge=0)
    cap: float | None = Field(default=None, ge=0)
    portal_only: bool = False
    start_date: date | None = None
    end_date: date | None = None
    notes: str = ""

    @property
    def cap_period(self) -> CapPeriod:
        from swipewise.engine.caps import infer_cap_period

        return infer_cap_period(self.notes)

    @property
    def is_capped(self) -> bool:
        return bool(self.cap)

    def is_active_on(self, on: date) -> bool:
        if self.start_date and self.start_date > on:
            return False
        if self.end_date and self.end_date < on:
            return False
        return True


class Card(BaseModel):
    id: str
    name: str
    issuer: str = ""
    network: str = ""
    annual_fee: float = 0
    rewards: list[Reward] = Field(default_factory=list)

    @model_validator(mode="after")
    def _bind_rewards(self) -> "Card":
        for reward in self.rewards:
            if reward.card_id is None:
                reward.card_id = self.id
        return self


class UserCardOwnership(BaseModel):
    user_id: str
    card_id: str


class SpendingRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    card_id: str
    category: str
    amount: float = Field(gt=0)
    date: date


class ClassificationResult(BaseModel):
    category: str
    confidence: float = Field(ge=0, le=1)
    source: ClassificationSource
    reasoning: str = ""


class CapStatus(BaseModel):
    remaining: float | None = None
    total: float | None = None
    used: float | None = None
    percentage: int = 0


class RewardComputation(BaseModel):
    category: str
    multiplier: float
    effective_rate: float
    reward_value: Decimal
    portal_only: bool = False
    cap_status: CapStatus = Field(default_factory=CapStatus)
    notes: str = ""


class RankedCard(RewardComputation):
    card_id: str
    card_name: str
    issuer: str = ""
    network: str = ""
    annual_fee: float = 0
    total_value: float
    simplicity: int
    recommendation: str


class CapUtilization(BaseModel):
    card_id: str
    card_name: str
    category: str
    cap: float
    period: CapPeriod
    spent: float
    remaining: float
    utilization: float


class PortfolioGap(BaseModel):
    category: str
    user_best_rate: float
    market_best_rate: float
    improvement: float
    priority: Priority


class CardSuggestion(BaseModel):
    card_id: str
    card_name: str
    issuer: str = ""
    annual_fee: float = 0
    current_rate: float
    new_rate: float
    improvement: float
    justification: str


class CategoryGap(PortfolioGap):
    recommendations: list[CardSuggestion] = Field(default_factory=list)


class PortfolioSummary(BaseModel):
    total_gaps: int
    high_priority_gaps: int
    total_improvement_potential: float


class PortfolioAnalysis(BaseModel):
    gaps: list[CategoryGap]
    summary: PortfolioSummary


class OwnedCardRate(BaseModel):
    card_id: str
    card_name: str
    issuer: str = ""
    rate: float
    annual_fee: float = 0
    reward: Reward


class CategoryComparison(BaseModel):
    category: str
    user_current_cards: list[OwnedCardRate]
    market_leaders: list[CardSuggestion]
    user_best_rate: float
    market_best_rate: float
    has_good_coverage: bool


class CategorySpend(BaseModel):
    category: str
    total_amount: float
    transaction_count: int
    avg_amount: float


class CardSpend(BaseModel):
    card_id: str
    card_name: str = ""
    issuer: str = ""
    total_amount: float
    transaction_count: int
    avg_amount: float

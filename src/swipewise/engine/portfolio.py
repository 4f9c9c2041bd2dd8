import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from swipewise.domain.models import (
    Card,
    CardSuggestion,
    CategoryComparison,
    CategoryGap,
    OwnedCardRate,
    PortfolioAnalysis,
    PortfolioGap,
    PortfolioSummary,
    Priority,
    Reward,
)
from swipewise.repository.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

BASE_RATE = 1.0
GOOD_COVERAGE_MARGIN = 1.0
TRACKED_CATEGORIES = ["Dining", "Grocery", "Gas", "Travel", "Entertainment", "Online"]


def justification(card: Card, reward: Reward, category: str) -> str:
    rate = f"{reward.multiplier:g}x on {category}"
    if reward.portal_only:
        return f"{card.name} earns {rate} when booked through the issuer portal"
    if reward.is_capped:
        return f"{card.name} earns {rate} on up to ${reward.cap:,.0f} per {_period_noun(reward)}"
    return f"{card.name} earns {rate} with no spending cap"


def _period_noun(reward: Reward) -> str:
    return {"monthly": "month", "quarterly": "quarter", "yearly": "year"}[reward.cap_period.value]


class PortfolioGapAnalyzer:
    def __init__(
        self,
        catalog: CatalogStore,
        min_improvement: float = 1.0,
        medium_priority: float = 1.5,
        high_priority: float = 3.0,
        min_card_increment: float = 0.5,
        max_recommendations: int = 5,
        market_ceiling: float = 10.0,
        auto_cards_per_gap: int = 3,
        category_mode_cards: int = 8,
        tracked_categories: list[str] | None = None,
        max_workers: int = 4,
    ):
        self.catalog = catalog
        self.min_improvement = min_improvement
        self.medium_priority = medium_priority
        self.high_priority = high_priority
        self.min_card_increment = min_card_increment
        self.max_recommendations = max_recommendations
        self.market_ceiling = market_ceiling
        self.auto_cards_per_gap = auto_cards_per_gap
        self.category_mode_cards = category_mode_cards
        self.tracked_categories = tracked_categories or list(TRACKED_CATEGORIES)
        self.max_workers = max_workers

    def analyze(
        self,
        user_id: str,
        mode: str = "auto",
        category: str | None = None,
        on: date | None = None,
    ) -> PortfolioAnalysis | CategoryComparison:
        on = on or date.today()
        if mode == "auto":
            return self.find_gaps(user_id, on)
        if mode == "category":
            if not category:
                raise ValueError("Category is required for category mode.")
            return self.compare_category(user_id, category, on)
        raise ValueError(f"Unknown analysis mode: {mode}")

    def priority(self, improvement: float) -> Priority:
        if improvement >= self.high_priority:
            return Priority.HIGH
        if improvement >= self.medium_priority:
            return Priority.MEDIUM
        return Priority.LOW

    def user_best_rate(self, owned: list[Card], category: str, on: date) -> float:
        rates = [
            reward.multiplier
            for card in owned
            if (reward := self.catalog.best_reward(card, category, on)) is not None
        ]
        return max(rates + [BASE_RATE])

    def market_best_rate(self, category: str, on: date) -> float:
        return self.catalog.market_best_rate(
            category, on, ceiling=self.market_ceiling, default=BASE_RATE
        )

    def _category_gap(self, owned: list[Card], category: str, on: date) -> PortfolioGap | None:
        user_best = self.user_best_rate(owned, category, on)
        market_best = self.market_best_rate(category, on)
        improvement = market_best - user_best
        if improvement < self.min_improvement:
            return None
        return PortfolioGap(
            category=category,
            user_best_rate=user_best,
            market_best_rate=market_best,
            improvement=round(improvement, 2),
            priority=self.priority(improvement),
        )

    def _suggestions(
        self, category: str, current_rate: float, owned_ids: set[str], on: date, limit: int
    ) -> list[CardSuggestion]:
        suggestions: list[CardSuggestion] = []
        for card, reward in self.catalog.top_cards_for_category(category, limit, on):
            if card.id in owned_ids:
                continue
            if reward.multiplier <= current_rate:
                continue
            suggestions.append(
                CardSuggestion(
                    card_id=card.id,
                    card_name=card.name,
                    issuer=card.issuer,
                    annual_fee=card.annual_fee,
                    current_rate=current_rate,
                    new_rate=reward.multiplier,
                    improvement=round(reward.multiplier - current_rate, 2),
                    justification=justification(card, reward, category),
                )
            )
        return suggestions

    def find_gaps(self, user_id: str, on: date) -> PortfolioAnalysis:
        owned = self.catalog.owned_cards(user_id)
        owned_ids = {card.id for card in owned}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._category_gap, owned, category, on)
                for category in self.tracked_categories
            ]
            gaps = [gap for future in futures if (gap := future.result()) is not None]

        gaps.sort(key=lambda gap: gap.improvement, reverse=True)

        category_gaps: list[CategoryGap] = []
        for gap in gaps:
            suggestions = [
                suggestion
                for suggestion in self._suggestions(
                    gap.category, gap.user_best_rate, owned_ids, on, self.auto_cards_per_gap
                )
                if suggestion.improvement > self.min_card_increment
            ]
            if not suggestions:
                logger.debug("Gap in %s has no card to suggest", gap.category)
                continue
            category_gaps.append(CategoryGap(**gap.model_dump(), recommendations=suggestions))

        logger.info("Found %d portfolio gap(s) for %s", len(category_gaps), user_id)
        return PortfolioAnalysis(
            gaps=category_gaps,
            summary=PortfolioSummary(
                total_gaps=len(category_gaps),
                high_priority_gaps=sum(1 for gap in category_gaps if gap.priority is Priority.HIGH),
                total_improvement_potential=round(sum(gap.improvement for gap in category_gaps), 2),
            ),
        )

    def compare_category(self, user_id: str, category: str, on: date) -> CategoryComparison:
        owned = self.catalog.owned_cards(user_id)
        owned_ids = {card.id for card in owned}

        current: list[OwnedCardRate] = []
        for card in owned:
            reward = self.catalog.best_reward(card, category, on)
            if reward is None or reward.multiplier <= BASE_RATE:
                continue
            current.append(
                OwnedCardRate(
                    card_id=card.id,
                    card_name=card.name,
                    issuer=card.issuer,
                    rate=reward.multiplier,
                    annual_fee=card.annual_fee,
                    reward=reward,
                )
            )
        current.sort(key=lambda item: (-item.rate, item.annual_fee))

        user_best = current[0].rate if current else BASE_RATE
        leaders = self._suggestions(category, user_best, owned_ids, on, self.category_mode_cards)
        leaders.sort(key=lambda item: (-item.new_rate, item.annual_fee))
        market_best = self.market_best_rate(category, on)

        return CategoryComparison(
            category=category,
            user_current_cards=current,
            market_leaders=leaders[: self.max_recommendations],
            user_best_rate=user_best,
            market_best_rate=market_best,
            has_good_coverage=user_best >= market_best - GOOD_COVERAGE_MARGIN,
        )

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from swipewise.domain.categories import DEFAULT_TAXONOMY, CategoryTaxonomy, is_wildcard
from swipewise.domain.models import (
    WILDCARD_CATEGORY,
    Card,
    CapStatus,
    Reward,
    RewardComputation,
)
from swipewise.engine.caps import SpendingCapTracker

logger = logging.getLogger(__name__)

DEFAULT_BASE_RATE = 1.0
CENTS = Decimal("0.01")


def base_reward(card_id: str | None = None) -> Reward:
    return Reward(
        card_id=card_id,
        category=WILDCARD_CATEGORY,
        multiplier=DEFAULT_BASE_RATE,
        notes="Base reward rate",
    )


def reward_value(amount: float | None, rate: float) -> Decimal:
    if not amount:
        return Decimal("0.00")
    value = Decimal(str(amount)) * Decimal(str(rate)) / Decimal(100)
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def blended_rate(multiplier: float, overflow_rate: float, remaining: float, amount: float) -> float:
    """Rate for a purchase that straddles the cap boundary."""
    if remaining <= 0:
        return overflow_rate
    if amount <= remaining:
        return multiplier
    share = remaining / amount
    return multiplier * share + overflow_rate * (1 - share)


class RewardCalculator:
    def __init__(
        self,
        cap_tracker: SpendingCapTracker,
        taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
    ):
        self.cap_tracker = cap_tracker
        self.taxonomy = taxonomy

    def applicable_rewards(self, card: Card, category: str, on: date) -> list[Reward]:
        return [
            reward
            for reward in card.rewards
            if self.taxonomy.applies(reward.category, category) and reward.is_active_on(on)
        ]

    def base_rate(self, card: Card, on: date) -> float:
        rates = [
            reward.multiplier
            for reward in card.rewards
            if is_wildcard(reward.category) and not reward.is_capped and reward.is_active_on(on)
        ]
        return max(rates, default=DEFAULT_BASE_RATE)

    def effective_rate(
        self,
        card: Card,
        reward: Reward,
        category: str,
        amount: float | None,
        on: date,
        user_id: str | None,
    ) -> tuple[float, CapStatus]:
        if not reward.is_capped:
            return reward.multiplier, CapStatus()
        if not user_id:
            return reward.multiplier, CapStatus(total=reward.cap)

        status = self.cap_tracker.cap_status(reward, user_id, card.id, category, on)
        overflow = min(self.base_rate(card, on), reward.multiplier)
        remaining = status.remaining or 0.0
        if not amount:
            # without an amount only the next dollar matters
            return (reward.multiplier if remaining > 0 else overflow), status
        return blended_rate(reward.multiplier, overflow, remaining, amount), status

    def compute_reward(
        self,
        card: Card,
        category: str,
        amount: float | None,
        on: date,
        user_id: str | None = None,
    ) -> RewardComputation:
        try:
            return self._compute(card, category, amount, on, user_id)
        except Exception:
            logger.exception("Reward computation failed for %s/%s, using base rate", card.id, category)
            return self._from_reward(base_reward(card.id), DEFAULT_BASE_RATE, amount, CapStatus())

    def _compute(
        self,
        card: Card,
        category: str,
        amount: float | None,
        on: date,
        user_id: str | None,
    ) -> RewardComputation:
        best: tuple[Reward, float, CapStatus] | None = None
        for reward in self.applicable_rewards(card, category, on):
            rate, status = self.effective_rate(card, reward, category, amount, on, user_id)
            if best is None or rate > best[1]:
                best = (reward, rate, status)

        if best is None:
            logger.debug("No reward on %s applies to %s", card.id, category)
            return self._from_reward(base_reward(card.id), DEFAULT_BASE_RATE, amount, CapStatus())

        reward, rate, status = best
        return self._from_reward(reward, rate, amount, status)

    def _from_reward(
        self, reward: Reward, rate: float, amount: float | None, status: CapStatus
    ) -> RewardComputation:
        return RewardComputation(
            category=reward.category,
            multiplier=reward.multiplier,
            effective_rate=round(rate, 4),
            reward_value=reward_value(amount, rate),
            portal_only=reward.portal_only,
            cap_status=status,
            notes=reward.notes,
        )

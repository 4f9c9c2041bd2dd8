from datetime import date

from swipewise.domain.models import Card, RankedCard, RewardComputation
from swipewise.engine.evaluator import RewardCalculator


def simplicity_score(computation: RewardComputation) -> int:
    score = 100
    if computation.portal_only:
        score -= 30
    if computation.cap_status.total:
        score -= 20
    if "activation" in computation.notes.lower() or "activate" in computation.notes.lower():
        score -= 25
    return max(0, score)


def _format_rate(rate: float) -> str:
    return f"{rate:g}"


def recommendation_text(card: Card, computation: RewardComputation) -> str:
    text = f"Earn {_format_rate(computation.effective_rate)}x back"
    if computation.portal_only:
        text += " (requires booking through portal)"
    if computation.cap_status.total:
        text += f" (up to ${computation.cap_status.total:,.0f} spending)"
    if card.annual_fee > 0:
        text += f" • ${card.annual_fee:,.0f} annual fee"
    return text


def _rank_key(card: RankedCard) -> tuple[float, float]:
    # whole cents
    return -round(card.total_value, 2), -card.effective_rate


def rank_cards(
    cards: list[Card],
    category: str,
    amount: float | None,
    on: date,
    calculator: RewardCalculator,
    user_id: str | None = None,
) -> list[RankedCard]:
    ranked: list[RankedCard] = []
    for card in cards:
        computation = calculator.compute_reward(card, category, amount, on, user_id)
        total_value = float(computation.reward_value) if amount else computation.effective_rate
        ranked.append(
            RankedCard(
                **computation.model_dump(),
                card_id=card.id,
                card_name=card.name,
                issuer=card.issuer,
                network=card.network,
                annual_fee=card.annual_fee,
                total_value=total_value,
                simplicity=simplicity_score(computation),
                recommendation=recommendation_text(card, computation),
            )
        )

    # sort is stable, so exact ties keep catalog order
    ranked.sort(key=_rank_key)
    return ranked

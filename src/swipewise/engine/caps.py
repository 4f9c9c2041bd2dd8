import calendar
import logging
import re
from datetime import date

from swipewise.domain.categories import is_wildcard
from swipewise.domain.models import Card, CapPeriod, CapStatus, CapUtilization, Reward
from swipewise.errors import CapLookupFailure
from swipewise.repository.ledger import SpendingLedger

logger = logging.getLogger(__name__)

_QUARTER_PATTERN = re.compile(r"\bquarter|\bq[1-4]\b")


def infer_cap_period(notes: str | None) -> CapPeriod:
    """Read the cap reset period from a reward's free-text notes.

    Issuer notes say things like "up to $1,500 per quarter" or
    "$500/mo"; anything that names no period is treated as a yearly cap.
    """
    text = (notes or "").lower()
    if "month" in text or "/mo" in text:
        return CapPeriod.MONTHLY
    if _QUARTER_PATTERN.search(text):
        return CapPeriod.QUARTERLY
    return CapPeriod.YEARLY


def cap_window(period: CapPeriod, ref_date: date) -> tuple[date, date]:
    if period is CapPeriod.MONTHLY:
        last_day = calendar.monthrange(ref_date.year, ref_date.month)[1]
        return ref_date.replace(day=1), ref_date.replace(day=last_day)

    if period is CapPeriod.QUARTERLY:
        first_month = 3 * ((ref_date.month - 1) // 3) + 1
        last_month = first_month + 2
        last_day = calendar.monthrange(ref_date.year, last_month)[1]
        return date(ref_date.year, first_month, 1), date(ref_date.year, last_month, last_day)

    return date(ref_date.year, 1, 1), date(ref_date.year, 12, 31)


class SpendingCapTracker:
    def __init__(self, ledger: SpendingLedger):
        self.ledger = ledger

    def spend_in_period(
        self,
        reward: Reward,
        user_id: str | None,
        card_id: str,
        category: str,
        ref_date: date,
    ) -> float:
        if not user_id:
            return 0.0

        start, end = cap_window(reward.cap_period, ref_date)
        spend_category = None if is_wildcard(reward.category) else category
        try:
            return self.ledger.total_spent(user_id, card_id, spend_category, start, end)
        except CapLookupFailure as exc:
            logger.warning("Cap lookup failed for %s/%s, assuming no spend: %s", card_id, category, exc)
            return 0.0

    def cap_status(
        self,
        reward: Reward,
        user_id: str | None,
        card_id: str,
        category: str,
        ref_date: date,
    ) -> CapStatus:
        if not reward.is_capped:
            return CapStatus()
        if not user_id:
            return CapStatus(total=reward.cap)

        spent = self.spend_in_period(reward, user_id, card_id, category, ref_date)
        remaining = max(0.0, reward.cap - spent)
        used = reward.cap - remaining
        return CapStatus(
            remaining=remaining,
            total=reward.cap,
            used=used,
            percentage=round(used / reward.cap * 100) if reward.cap else 0,
        )

    def cap_utilization(
        self, user_id: str, cards: list[Card], ref_date: date
    ) -> list[CapUtilization]:
        rows: list[CapUtilization] = []
        for card in cards:
            for reward in card.rewards:
                if not reward.is_capped or not reward.is_active_on(ref_date):
                    continue
                spent = self.spend_in_period(reward, user_id, card.id, reward.category, ref_date)
                rows.append(
                    CapUtilization(
                        card_id=card.id,
                        card_name=card.name,
                        category=reward.category,
                        cap=reward.cap,
                        period=reward.cap_period,
                        spent=round(spent, 2),
                        remaining=round(max(0.0, reward.cap - spent), 2),
                        utilization=round(min(spent / reward.cap * 100, 100.0), 1),
                    )
                )

        rows.sort(key=lambda row: row.utilization, reverse=True)
        return rows

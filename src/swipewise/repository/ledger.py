import json
import logging
import threading
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Protocol

from swipewise.domain.categories import DEFAULT_TAXONOMY, CategoryTaxonomy
from swipewise.domain.models import Card, CardSpend, CategorySpend, SpendingRecord
from swipewise.errors import CapLookupFailure

logger = logging.getLogger(__name__)


class SpendingLedger(Protocol):
    def record(self, record: SpendingRecord) -> None: ...

    def record_many(self, records: list[SpendingRecord]) -> int: ...

    def total_spent(
        self,
        user_id: str,
        card_id: str,
        category: str | None,
        start: date,
        end: date,
    ) -> float: ...

    def records_for(self, user_id: str, start: date, end: date) -> list[SpendingRecord]: ...

    def recent_records(self, user_id: str, limit: int = 10) -> list[SpendingRecord]: ...


def _sum_matching(
    records: list[SpendingRecord],
    user_id: str,
    card_id: str,
    category: str | None,
    start: date,
    end: date,
    taxonomy: CategoryTaxonomy,
) -> float:
    # category None counts every purchase on the card
    return sum(
        rec.amount
        for rec in records
        if rec.user_id == user_id
        and rec.card_id == card_id
        and start <= rec.date <= end
        and (category is None or taxonomy.matches(category, rec.category))
    )


def _latest(records: list[SpendingRecord], user_id: str, limit: int) -> list[SpendingRecord]:
    # newest append first
    mine = [rec for rec in reversed(records) if rec.user_id == user_id]
    return mine[: max(limit, 0)]


def summarize_by_category(records: list[SpendingRecord]) -> list[CategorySpend]:
    totals: dict[str, list[float]] = {}
    for rec in records:
        totals.setdefault(rec.category, []).append(rec.amount)

    summary = [
        CategorySpend(
            category=category,
            total_amount=round(sum(amounts), 2),
            transaction_count=len(amounts),
            avg_amount=round(sum(amounts) / len(amounts), 2),
        )
        for category, amounts in totals.items()
    ]
    summary.sort(key=lambda item: item.total_amount, reverse=True)
    return summary


def summarize_by_card(records: list[SpendingRecord], cards: Iterable[Card] = ()) -> list[CardSpend]:
    by_id = {card.id: card for card in cards}
    totals: dict[str, list[float]] = {}
    for rec in records:
        totals.setdefault(rec.card_id, []).append(rec.amount)

    summary = []
    for card_id, amounts in totals.items():
        card = by_id.get(card_id)
        summary.append(
            CardSpend(
                card_id=card_id,
                card_name=card.name if card else "",
                issuer=card.issuer if card else "",
                total_amount=round(sum(amounts), 2),
                transaction_count=len(amounts),
                avg_amount=round(sum(amounts) / len(amounts), 2),
            )
        )
    summary.sort(key=lambda item: item.total_amount, reverse=True)
    return summary


class InMemorySpendingLedger:
    def __init__(
        self,
        records: list[SpendingRecord] | None = None,
        taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
    ):
        self._records = list(records or [])
        self.taxonomy = taxonomy
        self._lock = threading.Lock()

    def record(self, record: SpendingRecord) -> None:
        with self._lock:
            self._records.append(record)

    def record_many(self, records: list[SpendingRecord]) -> int:
        with self._lock:
            self._records.extend(records)
        return len(records)

    def total_spent(
        self,
        user_id: str,
        card_id: str,
        category: str | None,
        start: date,
        end: date,
    ) -> float:
        with self._lock:
            records = list(self._records)
        return _sum_matching(records, user_id, card_id, category, start, end, self.taxonomy)

    def records_for(self, user_id: str, start: date, end: date) -> list[SpendingRecord]:
        with self._lock:
            return [
                rec for rec in self._records if rec.user_id == user_id and start <= rec.date <= end
            ]

    def recent_records(self, user_id: str, limit: int = 10) -> list[SpendingRecord]:
        with self._lock:
            return _latest(self._records, user_id, limit)


class JsonlSpendingLedger:
    """Append-only ledger stored as one JSON object per line.

    Parsed records are kept in memory and reused until the file's size or
    modification time changes, so cap lookups do not re-read the file.
    """

    def __init__(self, ledger_file: str, taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY):
        self.ledger_file = Path(ledger_file)
        self.taxonomy = taxonomy
        self._lock = threading.Lock()
        self._cached: tuple[tuple[int, int] | None, list[SpendingRecord]] | None = None
        self.reads = 0

    def _stamp(self) -> tuple[int, int] | None:
        try:
            stat = self.ledger_file.stat()
        except FileNotFoundError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def _read_all(self) -> list[SpendingRecord]:
        try:
            stamp = self._stamp()
            if self._cached is not None and self._cached[0] == stamp:
                return self._cached[1]
            if stamp is None:
                records = []
            else:
                self.reads += 1
                with self.ledger_file.open("r", encoding="utf-8") as fh:
                    records = [
                        SpendingRecord.model_validate(json.loads(line))
                        for line in fh
                        if line.strip()
                    ]
        except (OSError, ValueError) as exc:
            raise CapLookupFailure(f"Could not read ledger {self.ledger_file}: {exc}") from exc

        self._cached = (stamp, records)
        return records

    def _append(self, records: list[SpendingRecord]) -> None:
        before = self._stamp()
        self.ledger_file.parent.mkdir(parents=True, exist_ok=True)
        with self.ledger_file.open("a", encoding="utf-8") as fh:
            fh.write("".join(rec.model_dump_json() + "\n" for rec in records))

        if self._cached is not None and self._cached[0] == before:
            self._cached = (self._stamp(), self._cached[1] + list(records))
        else:
            self._cached = None

    def record(self, record: SpendingRecord) -> None:
        with self._lock:
            self._append([record])
        logger.info(
            "Recorded %.2f on %s (%s) for %s",
            record.amount,
            record.card_id,
            record.category,
            record.user_id,
        )

    def record_many(self, records: list[SpendingRecord]) -> int:
        if not records:
            return 0
        with self._lock:
            self._append(records)
        logger.info("Imported %d spending record(s) into %s", len(records), self.ledger_file)
        return len(records)

    def total_spent(
        self,
        user_id: str,
        card_id: str,
        category: str | None,
        start: date,
        end: date,
    ) -> float:
        with self._lock:
            records = self._read_all()
        return _sum_matching(records, user_id, card_id, category, start, end, self.taxonomy)

    def records_for(self, user_id: str, start: date, end: date) -> list[SpendingRecord]:
        with self._lock:
            records = self._read_all()
        return [rec for rec in records if rec.user_id == user_id and start <= rec.date <= end]

    def recent_records(self, user_id: str, limit: int = 10) -> list[SpendingRecord]:
        with self._lock:
            records = self._read_all()
        return _latest(records, user_id, limit)

import json
import threading
from datetime import date
from pathlib import Path

from swipewise.domain.categories import DEFAULT_TAXONOMY, CategoryTaxonomy
from swipewise.domain.models import Card, Reward, UserCardOwnership


class CatalogStore:
    """Read-only card catalog plus the user-to-card ownership table.

    The catalog file holds ``{"cards": [...], "ownership": [...]}``. It is
    read once and kept in memory; the store never writes it back.
    """

    def __init__(self, catalog_file: str, taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY):
        self.catalog_file = Path(catalog_file)
        self.taxonomy = taxonomy
        self._cards: list[Card] | None = None
        self._ownership: list[UserCardOwnership] = []
        self._lock = threading.Lock()

    def _load(self) -> list[Card]:
        with self._lock:
            if self._cards is not None:
                return self._cards

            if not self.catalog_file.exists():
                raise FileNotFoundError(f"Catalog file not found: {self.catalog_file}")

            with self.catalog_file.open("r", encoding="utf-8") as fh:
                data = json.load(fh)

            self._ownership = [
                UserCardOwnership.model_validate(item) for item in data.get("ownership", [])
            ]
            self._cards = [Card.model_validate(item) for item in data.get("cards", [])]
            return self._cards

    def load_cards(self) -> list[Card]:
        return list(self._load())

    def get_card(self, card_id: str) -> Card:
        for card in self._load():
            if card.id == card_id:
                return card
        raise ValueError(f"Unknown card id: {card_id}")

    def owned_card_ids(self, user_id: str) -> set[str]:
        self._load()
        return {item.card_id for item in self._ownership if item.user_id == user_id}

    def owned_cards(self, user_id: str) -> list[Card]:
        owned = self.owned_card_ids(user_id)
        return [card for card in self._load() if card.id in owned]

    def best_reward(self, card: Card, category: str, on: date) -> Reward | None:
        best: Reward | None = None
        for reward in card.rewards:
            if not self.taxonomy.applies(reward.category, category) or not reward.is_active_on(on):
                continue
            if best is None or reward.multiplier > best.multiplier:
                best = reward
        return best

    def market_best_rate(
        self, category: str, on: date, ceiling: float = 10.0, default: float = 1.0
    ) -> float:
        rates = [
            reward.multiplier
            for card in self._load()
            if (reward := self.best_reward(card, category, on)) is not None
        ]
        return min(max(rates, default=default), ceiling)

    def top_cards_for_category(
        self, category: str, limit: int, on: date
    ) -> list[tuple[Card, Reward]]:
        matches = [
            (card, reward)
            for card in self._load()
            if (reward := self.best_reward(card, category, on)) is not None
        ]
        matches.sort(key=lambda item: (-item[1].multiplier, item[0].annual_fee))
        return matches[:limit]

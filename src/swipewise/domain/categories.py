"""Spending category taxonomy and the reward-category synonym table."""

import logging
from collections.abc import Iterable, Mapping

from swipewise.domain.models import OTHER_CATEGORY, WILDCARD_CATEGORY
from swipewise.errors import ConfigurationConflict

logger = logging.getLogger(__name__)

CATEGORIES = [
    "Travel",
    "Dining",
    "Grocery",
    "Gas",
    "Entertainment",
    "Online",
    "Transit",
    "Healthcare",
    "Insurance",
    "Utilities",
    OTHER_CATEGORY,
]

CATEGORY_SYNONYMS: dict[str, set[str]] = {
    "Dining": {"Restaurant", "Restaurants", "Food", "Food Delivery", "Takeout"},
    "Travel": {"Transportation", "Hotel", "Hotels", "Airfare", "Airline", "Airlines", "Car Rental"},
    "Grocery": {"Groceries", "Supermarket", "Supermarkets", "Grocery Stores"},
    "Gas": {"Fuel", "Gasoline", "Gas Stations", "EV Charging"},
    "Entertainment": {"Streaming", "Movies", "Live Events"},
    "Transit": {"Public Transport", "Public Transportation", "Commute", "Parking", "Tolls"},
    "Online": {"Online Shopping", "Online Retail", "E-commerce"},
    "Healthcare": {"Pharmacy", "Drugstores", "Medical"},
    "Utilities": {"Phone", "Internet", "Cable", "Wireless"},
}


def _fold(name: str) -> str:
    return " ".join(name.split()).casefold()


class CategoryTaxonomy:
    def __init__(self, synonyms: Mapping[str, Iterable[str]]):
        self._canonical_by_name: dict[str, str] = {}
        for canonical, names in synonyms.items():
            for name in {canonical, *names}:
                key = _fold(name)
                owner = self._canonical_by_name.get(key)
                if owner is not None and owner != canonical:
                    raise ConfigurationConflict(
                        f"Category synonym '{name}' is mapped to both '{owner}' and '{canonical}'."
                    )
                self._canonical_by_name[key] = canonical
        logger.debug("Category taxonomy ready with %d names", len(self._canonical_by_name))

    def canonical(self, name: str) -> str:
        key = _fold(name)
        return self._canonical_by_name.get(key, key)

    def matches(self, reward_category: str, purchase_category: str) -> bool:
        """Direct or synonym match. The wildcard is handled by the caller."""
        if not reward_category or not purchase_category:
            return False
        return self.canonical(reward_category) == self.canonical(purchase_category)

    def applies(self, reward_category: str, purchase_category: str) -> bool:
        if _fold(reward_category or "") == _fold(WILDCARD_CATEGORY):
            return True
        return self.matches(reward_category, purchase_category)


def is_wildcard(category: str) -> bool:
    return _fold(category or "") == _fold(WILDCARD_CATEGORY)


DEFAULT_TAXONOMY = CategoryTaxonomy(CATEGORY_SYNONYMS)

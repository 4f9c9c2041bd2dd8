from itertools import combinations

import pytest

from swipewise.domain.categories import (
    CATEGORY_SYNONYMS,
    DEFAULT_TAXONOMY,
    CategoryTaxonomy,
    is_wildcard,
)
from swipewise.errors import ConfigurationConflict


def test_synonym_sets_are_pairwise_disjoint() -> None:
    for (a, names_a), (b, names_b) in combinations(CATEGORY_SYNONYMS.items(), 2):
        folded_a = {name.casefold() for name in names_a | {a}}
        folded_b = {name.casefold() for name in names_b | {b}}
        assert not folded_a & folded_b, f"{a} and {b} share synonyms"


def test_overlapping_synonyms_fail_at_construction() -> None:
    with pytest.raises(ConfigurationConflict):
        CategoryTaxonomy({"Dining": {"Food"}, "Grocery": {"food"}})


def test_synonyms_resolve_to_canonical_category() -> None:
    assert DEFAULT_TAXONOMY.canonical("supermarkets") == "Grocery"
    assert DEFAULT_TAXONOMY.matches("Restaurants", "Dining")
    assert DEFAULT_TAXONOMY.matches("dining", "DINING")
    assert not DEFAULT_TAXONOMY.matches("Restaurants", "Grocery")


def test_wildcard_applies_only_through_applies() -> None:
    assert DEFAULT_TAXONOMY.applies("All", "Gas")
    assert not DEFAULT_TAXONOMY.matches("All", "Gas")
    assert is_wildcard(" all ")
    assert not is_wildcard("Other")

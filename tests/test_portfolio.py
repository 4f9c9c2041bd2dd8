import json
from datetime import date

import pytest

from swipewise.domain.models import PortfolioAnalysis, Priority
from swipewise.engine.portfolio import PortfolioGapAnalyzer
from swipewise.repository.catalog_store import CatalogStore

AS_OF = date(2026, 5, 1)

CATALOG = {
    "cards": [
        {
            "id": "starter",
            "name": "Starter Card",
            "issuer": "Bank A",
            "annual_fee": 0,
            "rewards": [{"category": "Dining", "multiplier": 1.5}, {"category": "All", "multiplier": 1}],
        },
        {
            "id": "foodie",
            "name": "Foodie Card",
            "issuer": "Bank B",
            "annual_fee": 0,
            "rewards": [
                {"category": "Restaurants", "multiplier": 4, "cap": 1500, "notes": "up to $1,500 per quarter"},
                {"category": "All", "multiplier": 1},
            ],
        },
        {
            "id": "grocer",
            "name": "Grocer Card",
            "issuer": "Bank C",
            "annual_fee": 95,
            "rewards": [{"category": "Grocery", "multiplier": 6}, {"category": "All", "multiplier": 1}],
        },
        {
            "id": "flat_two",
            "name": "Flat Two",
            "issuer": "Bank D",
            "annual_fee": 0,
            "rewards": [{"category": "All", "multiplier": 2}],
        },
        {
            "id": "travel_portal",
            "name": "Portal Traveler",
            "issuer": "Bank E",
            "annual_fee": 395,
            "rewards": [
                {"category": "Hotels", "multiplier": 25, "portal_only": True},
                {"category": "All", "multiplier": 1},
            ],
        },
    ],
    "ownership": [
        {"user_id": "u1", "card_id": "starter"},
        {"user_id": "u2", "card_id": "foodie"},
        {"user_id": "u2", "card_id": "grocer"},
    ],
}


@pytest.fixture
def catalog(tmp_path) -> CatalogStore:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(CATALOG))
    return CatalogStore(str(path))


def test_dining_gap_is_medium_priority(catalog) -> None:
    analysis = PortfolioGapAnalyzer(catalog).find_gaps("u1", AS_OF)
    gaps = {gap.category: gap for gap in analysis.gaps}

    dining = gaps["Dining"]
    assert dining.user_best_rate == 1.5
    assert dining.market_best_rate == 4
    assert dining.priority == Priority.MEDIUM
    assert [s.card_id for s in dining.recommendations] == ["foodie"]
    assert "per quarter" in dining.recommendations[0].justification


def test_gaps_ordered_by_improvement(catalog) -> None:
    analysis = PortfolioGapAnalyzer(catalog).find_gaps("u1", AS_OF)

    improvements = [gap.improvement for gap in analysis.gaps]
    assert improvements == sorted(improvements, reverse=True)
    assert analysis.gaps[0].category == "Travel"
    assert analysis.gaps[0].market_best_rate == 10
    assert analysis.summary.total_gaps == len(analysis.gaps)
    assert analysis.summary.high_priority_gaps == 2


def test_owned_cards_are_never_suggested(catalog) -> None:
    for user_id in ["u1", "u2"]:
        owned = catalog.owned_card_ids(user_id)
        analysis = PortfolioGapAnalyzer(catalog).find_gaps(user_id, AS_OF)
        suggested = {s.card_id for gap in analysis.gaps for s in gap.recommendations}
        assert not suggested & owned

        comparison = PortfolioGapAnalyzer(catalog).compare_category(user_id, "Dining", AS_OF)
        assert not {s.card_id for s in comparison.market_leaders} & owned


def test_gap_without_suggestion_is_omitted(catalog) -> None:
    analyzer = PortfolioGapAnalyzer(catalog, min_card_increment=2.0)

    analysis = analyzer.find_gaps("u1", AS_OF)

    # Gas trails by 1.0 but only flat_two closes it
    assert "Gas" not in {gap.category for gap in analysis.gaps}


def test_compare_category(catalog) -> None:
    comparison = PortfolioGapAnalyzer(catalog).compare_category("u1", "Dining", AS_OF)

    assert [c.card_id for c in comparison.user_current_cards] == ["starter"]
    assert [s.card_id for s in comparison.market_leaders] == ["foodie", "flat_two"]
    assert comparison.user_best_rate == 1.5
    assert comparison.market_best_rate == 4
    assert not comparison.has_good_coverage


def test_analyze_dispatches_on_mode(catalog) -> None:
    analyzer = PortfolioGapAnalyzer(catalog)

    assert isinstance(analyzer.analyze("u2", "auto", on=AS_OF), PortfolioAnalysis)
    assert analyzer.analyze("u2", "category", "Grocery", on=AS_OF).has_good_coverage
    with pytest.raises(ValueError):
        analyzer.analyze("u2", "category")
    with pytest.raises(ValueError):
        analyzer.analyze("u2", "weekly")

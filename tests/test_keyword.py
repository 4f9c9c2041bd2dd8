import pytest

from swipewise.domain.models import ClassificationSource
from swipewise.nlp.keyword import classify_keywords, score_description


def test_merchant_hit_gives_confident_grocery() -> None:
    result = classify_keywords("weekly groceries at Whole Foods")

    assert result.category == "Grocery"
    assert result.confidence >= 0.85
    assert result.source == ClassificationSource.MERCHANT


def test_background_activity_is_suppressed() -> None:
    result = classify_keywords("listening to spotify during commute")

    assert result.category == "Transit"
    assert "Entertainment" in result.reasoning

    scores = score_description("listening to spotify during commute").scores
    assert scores["Transit"] > scores["Entertainment"]


def test_action_verb_supports_travel() -> None:
    result = classify_keywords("booking a hotel in new york")

    assert result.category == "Travel"
    assert result.confidence >= 0.8


def test_merchant_exclusion_words() -> None:
    assert classify_keywords("subway fare downtown").category == "Transit"
    assert classify_keywords("uber eats order for the office").category == "Dining"


def test_longer_merchant_is_not_double_counted_as_keyword() -> None:
    scores = score_description("whole foods run").scores

    assert set(scores) == {"Grocery"}


@pytest.mark.parametrize("description", ["", "   ", "zzz qqq"])
def test_no_match_falls_back_to_other(description: str) -> None:
    result = classify_keywords(description)

    assert result.category == "Other"
    assert result.confidence <= 0.2
    assert result.source == ClassificationSource.FALLBACK

from types import SimpleNamespace

import pytest

from swipewise.domain.models import ClassificationSource
from swipewise.errors import ExternalServiceUnavailable
from swipewise.nlp.semantic import SemanticCategorizer, similarity_to_confidence
from swipewise.rag.retriever import Exemplar, ExemplarIndex, OpenAIEmbedder, cosine_similarity

TRAINING = {
    "Travel": [("hotel booking", 1.0), ("airline ticket", 1.0)],
    "Dining": [("dinner out", 1.0)],
}


class KeywordEmbedder:
    """Maps text onto three axes: lodging, flights, food."""

    def __init__(self) -> None:
        self.calls = 0

    def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls += 1
        return [
            [
                1.0 if "hotel" in text else 0.0,
                1.0 if "airline" in text or "flight" in text else 0.0,
                1.0 if "dinner" in text else 0.0,
            ]
            for text in texts
        ]


def test_similarity_bands() -> None:
    assert similarity_to_confidence(0.5) == 0.5
    assert similarity_to_confidence(0.75) == pytest.approx(0.7665)
    assert similarity_to_confidence(0.9) == pytest.approx(0.9335)
    assert similarity_to_confidence(1.0) == 0.95
    assert similarity_to_confidence(-0.2) == 0.0


def test_index_returns_nearest_exemplars() -> None:
    index = ExemplarIndex.build(KeywordEmbedder(), TRAINING)

    matches = index.query("hotel for the conference", top_k=2)

    assert len(matches) == 2
    assert matches[0].category == "Travel"
    assert matches[0].text == "hotel booking"
    assert matches[0].score == pytest.approx(1.0)


def test_semantic_categorizer_reports_best_example() -> None:
    index = ExemplarIndex.build(KeywordEmbedder(), TRAINING)
    tier = SemanticCategorizer(index, top_k=1)

    result = tier.categorize("dinner with the team")

    assert result.category == "Dining"
    assert result.source == ClassificationSource.SEMANTIC
    assert result.confidence == 0.95
    assert '"dinner out"' in result.reasoning


def test_index_survives_save_and_load(tmp_path) -> None:
    embedder = KeywordEmbedder()
    index = ExemplarIndex.build(embedder, TRAINING)
    index.add_example("Travel", "flight to rome")
    path = tmp_path / "index.json"

    index.save(path)
    loaded = ExemplarIndex.load(path, embedder)

    assert len(loaded) == 4
    assert loaded.query("airline miles", top_k=1)[0].category == "Travel"


def test_load_missing_index_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ExemplarIndex.load(tmp_path / "missing.json", KeywordEmbedder())


def test_cosine_similarity_of_zero_vector() -> None:
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0


def test_openai_embedder_normalizes_input() -> None:
    seen: dict = {}

    def create(**kwargs):
        seen.update(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])

    client = SimpleNamespace(embeddings=SimpleNamespace(create=create))
    embedder = OpenAIEmbedder(api_key="", client=client)

    vectors = embedder.embed(["  Hotel In Rome "])

    assert vectors == [[0.1, 0.2]]
    assert seen["input"] == ["hotel in rome"]


def test_query_ranks_every_exemplar_by_similarity() -> None:
    index = ExemplarIndex.build(KeywordEmbedder(), TRAINING)

    matches = index.query("hotel and flight package", top_k=5)

    assert [m.text for m in matches][:2] == ["hotel booking", "airline ticket"]
    assert matches[0].score == pytest.approx(0.7071, abs=1e-4)
    assert matches[-1].score == 0.0


def test_empty_index_returns_no_matches() -> None:
    index = ExemplarIndex([], KeywordEmbedder())

    assert index.query("hotel", top_k=3) == []

    index.add_example("Travel", "hotel in lisbon", user_feedback=False)
    match = index.query("hotel", top_k=3)[0]
    assert match.text == "hotel in lisbon"
    assert match.weight == 0.8


class BrokenEmbedder:
    def embed(self, texts: list[str]) -> list[list[float]]:
        raise ExternalServiceUnavailable("embeddings down")


def test_find_similar_returns_nearest_examples() -> None:
    index = ExemplarIndex.build(KeywordEmbedder(), TRAINING)

    similar = index.find_similar("late dinner", limit=1)

    assert [(m.category, m.text) for m in similar] == [("Dining", "dinner out")]


def test_find_similar_is_empty_when_embeddings_fail() -> None:
    index = ExemplarIndex(
        [Exemplar("Dining", "dinner out", 1.0, [0.0, 0.0, 1.0])], BrokenEmbedder()
    )

    assert index.find_similar("late dinner") == []

import json
import logging
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Protocol

import numpy as np
from openai import OpenAI, OpenAIError

from swipewise.errors import ExternalServiceUnavailable
from swipewise.nlp.semantic import VectorMatch
from swipewise.rag.exemplars import CATEGORY_EXEMPLARS

logger = logging.getLogger(__name__)

USER_FEEDBACK_WEIGHT = 1.2
UNCONFIRMED_WEIGHT = 0.8


@dataclass
class Exemplar:
    category: str
    text: str
    weight: float
    vector: list[float]


class Embedder(Protocol):
    def embed(self, texts: list[str]) -> list[list[float]]: ...


class OpenAIEmbedder:
    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        timeout: float = 3.0,
        client: OpenAI | None = None,
    ):
        if client is None and not api_key:
            raise ValueError("OPENAI_API_KEY is required for embeddings.")
        self.model = model
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def embed(self, texts: list[str]) -> list[list[float]]:
        try:
            response = self.client.embeddings.create(
                model=self.model,
                input=[text.lower().strip() for text in texts],
            )
        except OpenAIError as exc:
            raise ExternalServiceUnavailable(f"Embedding request failed: {exc}") from exc

        if len(response.data) != len(texts):
            raise ExternalServiceUnavailable(
                f"Expected {len(texts)} embeddings, got {len(response.data)}."
            )
        return [item.embedding for item in response.data]


def normalize_rows(vectors) -> np.ndarray:
    matrix = np.asarray(vectors, dtype=float)
    norms = np.linalg.norm(matrix, axis=-1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms


def cosine_similarity(a: list[float], b: list[float]) -> float:
    if len(a) != len(b):
        raise ValueError("Vectors must have the same length.")
    return float(normalize_rows(a) @ normalize_rows(b))


class ExemplarIndex:
    """In-process vector search over embedded category exemplars.

    Exemplar vectors are kept as one row-normalized matrix, so a query is
    scored against every exemplar with a single matrix product.
    """

    def __init__(self, exemplars: list[Exemplar], embedder: Embedder):
        self.embedder = embedder
        self._exemplars = list(exemplars)
        self._matrix = normalize_rows([ex.vector for ex in self._exemplars]) if exemplars else None
        self._lock = threading.Lock()

    @classmethod
    def build(
        cls,
        embedder: Embedder,
        training_data: dict[str, list[tuple[str, float]]] = CATEGORY_EXEMPLARS,
        batch_size: int = 10,
    ) -> "ExemplarIndex":
        exemplars: list[Exemplar] = []
        for category, examples in training_data.items():
            for i in range(0, len(examples), batch_size):
                batch = examples[i : i + batch_size]
                vectors = embedder.embed([text for text, _ in batch])
                exemplars.extend(
                    Exemplar(category, text, weight, list(vector))
                    for (text, weight), vector in zip(batch, vectors)
                )
            logger.info("Embedded %d exemplars for %s", len(examples), category)
        return cls(exemplars, embedder)

    @classmethod
    def load(cls, path: str | Path, embedder: Embedder) -> "ExemplarIndex":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Exemplar index not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls([Exemplar(**item) for item in data], embedder)

    def save(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            payload = [asdict(exemplar) for exemplar in self._exemplars]
        path.write_text(json.dumps(payload), encoding="utf-8")

    def add_example(self, category: str, text: str, user_feedback: bool = True) -> Exemplar:
        vector = self.embedder.embed([text])[0]
        weight = USER_FEEDBACK_WEIGHT if user_feedback else UNCONFIRMED_WEIGHT
        exemplar = Exemplar(category, text, weight, list(vector))
        row = normalize_rows([vector])
        with self._lock:
            self._exemplars.append(exemplar)
            self._matrix = row if self._matrix is None else np.vstack([self._matrix, row])
        logger.info("Added exemplar %r -> %s", text, category)
        return exemplar

    def query(self, text: str, top_k: int) -> list[VectorMatch]:
        query_vec = normalize_rows(self.embedder.embed([text])[0])
        with self._lock:
            exemplars = list(self._exemplars)
            matrix = self._matrix
        if matrix is None or top_k <= 0:
            return []

        sims = matrix @ query_vec
        best = np.argsort(-sims, kind="stable")[:top_k]
        return [
            VectorMatch(
                category=exemplars[i].category,
                score=float(sims[i]),
                text=exemplars[i].text,
                weight=exemplars[i].weight,
            )
            for i in best
        ]

    def find_similar(self, text: str, limit: int = 5) -> list[VectorMatch]:
        """Nearest exemplars for display; an embedding outage yields no matches."""
        try:
            return self.query(text, limit)
        except ExternalServiceUnavailable as exc:
            logger.warning("Similar-exemplar lookup failed for %r: %s", text, exc)
            return []

    def __len__(self) -> int:
        with self._lock:
            return len(self._exemplars)

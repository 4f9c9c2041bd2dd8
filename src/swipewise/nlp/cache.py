import threading
from collections import OrderedDict

from swipewise.domain.models import ClassificationResult, ClassificationSource


def cache_key(description: str) -> str:
    return description.lower().strip()


class ClassificationCache:
    """Bounded description -> result map, evicting the oldest insertion first."""

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self._entries: OrderedDict[str, ClassificationResult] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, description: str) -> ClassificationResult | None:
        with self._lock:
            cached = self._entries.get(cache_key(description))
        if cached is None:
            return None
        return cached.model_copy(update={"source": ClassificationSource.CACHE})

    def put(self, description: str, result: ClassificationResult) -> None:
        key = cache_key(description)
        with self._lock:
            self._entries[key] = result
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict:
        with self._lock:
            return {"size": len(self._entries), "keys": list(self._entries)[:10]}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

import json
import logging
import math
import threading
import time
from collections import deque
from typing import Callable, Protocol

from openai import OpenAI, OpenAIError

from swipewise.domain.categories import CATEGORIES
from swipewise.domain.models import OTHER_CATEGORY, ClassificationResult, ClassificationSource
from swipewise.errors import ExternalServiceUnavailable, RateLimitExceeded

logger = logging.getLogger(__name__)

CATEGORY_DESCRIPTIONS = {
    "Travel": "flights, hotels, car rentals, rideshare, vacation expenses",
    "Dining": "restaurants, takeout, delivery, bars, coffee shops, food services",
    "Grocery": "supermarkets, grocery stores, food shopping, wholesale clubs",
    "Gas": "gas stations, fuel purchases, EV charging",
    "Entertainment": "movies, streaming services, concerts, events, gaming",
    "Online": "e-commerce, online shopping, digital purchases, app stores",
    "Transit": "public transportation, parking, tolls, commuter costs",
    "Healthcare": "medical expenses, pharmacy, dental, vision care",
    "Insurance": "insurance premiums, policy payments",
    "Utilities": "electricity, gas bills, water, internet, phone services",
    "Other": "anything that doesn't fit the above categories",
}

SYSTEM_PROMPT = (
    "You are a precise financial transaction categorization system. "
    "Always respond with valid JSON only."
)


class TextCategorizer(Protocol):
    def categorize(self, description: str) -> dict: ...


class RateLimiter:
    """Minimum spacing between calls plus a rolling per-minute ceiling.

    ``acquire`` never waits: when either limit is hit it raises
    ``RateLimitExceeded`` so the caller can fall back immediately.
    """

    def __init__(
        self,
        min_interval: float = 0.1,
        max_per_minute: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.min_interval = min_interval
        self.max_per_minute = max_per_minute
        self._clock = clock
        self._calls: deque[float] = deque()
        self._last_call: float | None = None
        self._total = 0
        self._lock = threading.Lock()

    def acquire(self) -> None:
        with self._lock:
            now = self._clock()
            if self._last_call is not None and now - self._last_call < self.min_interval:
                raise RateLimitExceeded("Minimum interval between generative calls not elapsed.")
            while self._calls and now - self._calls[0] >= 60.0:
                self._calls.popleft()
            if len(self._calls) >= self.max_per_minute:
                raise RateLimitExceeded("Generative calls per minute exhausted.")
            self._calls.append(now)
            self._last_call = now
            self._total += 1

    def stats(self) -> dict:
        with self._lock:
            return {"total_requests": self._total, "recent_requests": len(self._calls)}


def build_prompt(description: str) -> str:
    categories = "\n".join(f"- {name}: {CATEGORY_DESCRIPTIONS[name]}" for name in CATEGORIES)
    return (
        "Categorize this purchase description into one of these categories:\n\n"
        f"CATEGORIES:\n{categories}\n\n"
        "INSTRUCTIONS:\n"
        "1. Choose the MOST SPECIFIC category that applies\n"
        "2. For ambiguous cases, choose the most likely based on common usage\n"
        "3. Provide confidence from 0.0 to 1.0 (1.0 = completely certain)\n"
        "4. Give a brief reasoning for your choice\n\n"
        f'Purchase description: "{description}"\n\n'
        "Respond ONLY with JSON with keys: category, confidence, reasoning."
    )


def parse_response(content: str | None) -> dict:
    if not content:
        raise ExternalServiceUnavailable("LLM returned empty content.")

    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0].strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ExternalServiceUnavailable(f"LLM returned invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ExternalServiceUnavailable("LLM returned JSON that is not an object.")
    return data


class OpenAICategorizer:
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-mini",
        timeout: float = 8.0,
        client: OpenAI | None = None,
    ):
        if client is None and not api_key:
            raise ValueError("OPENAI_API_KEY is required for the generative categorizer.")
        self.model = model
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def categorize(self, description: str) -> dict:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=0.1,
                max_tokens=150,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(description)},
                ],
            )
        except OpenAIError as exc:
            raise ExternalServiceUnavailable(f"OpenAI request failed: {exc}") from exc

        return parse_response(response.choices[0].message.content)


class GenerativeCategorizer:
    def __init__(self, backend: TextCategorizer, rate_limiter: RateLimiter | None = None):
        self.backend = backend
        self.rate_limiter = rate_limiter or RateLimiter()

    def categorize(self, description: str) -> ClassificationResult:
        self.rate_limiter.acquire()
        payload = self.backend.categorize(description)

        category = payload.get("category")
        confidence = payload.get("confidence")
        if not category or isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise ExternalServiceUnavailable(f"Invalid response format from LLM: {payload!r}")

        if not math.isfinite(confidence):
            raise ExternalServiceUnavailable(f"Non-finite confidence from LLM: {confidence!r}")

        if category not in CATEGORIES:
            logger.warning("Unknown category from LLM: %s, defaulting to %s", category, OTHER_CATEGORY)
            category = OTHER_CATEGORY

        return ClassificationResult(
            category=category,
            confidence=max(0.0, min(1.0, float(confidence))),
            source=ClassificationSource.LLM,
            reasoning=str(payload.get("reasoning") or "No reasoning provided"),
        )

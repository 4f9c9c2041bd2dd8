"""Lexical tier of the category classifier."""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache

from swipewise.domain.models import OTHER_CATEGORY, ClassificationResult, ClassificationSource
from swipewise.nlp import lexicon

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.9
_PUNCTUATION = ".,!?;:()[]\"'"


@dataclass
class Token:
    start: int
    end: int
    word: str


@dataclass
class TermMatch:
    category: str
    term: str
    kind: str  # "merchant" or "keyword"
    start: int
    end: int
    first_token: int = 0
    last_token: int = 0
    score: float = 0.0
    evidence: set[str] = field(default_factory=set)

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class KeywordScores:
    text: str
    scores: dict[str, float]
    evidence: dict[str, set[str]]
    matches: list[TermMatch]

    def ranked(self) -> list[tuple[str, float]]:
        return sorted(
            self.scores.items(),
            key=lambda item: (item[1], lexicon.CATEGORY_PRIORITY.get(item[0], 0)),
            reverse=True,
        )


def normalize(text: str) -> str:
    return " ".join(text.lower().split())


@lru_cache(maxsize=None)
def _term_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(term) + r"(?:'?s)?(?![a-z0-9])")


def tokenize(text: str) -> list[Token]:
    return [
        Token(m.start(), m.end(), m.group().strip(_PUNCTUATION))
        for m in re.finditer(r"\S+", text)
    ]


def _locate(match: TermMatch, tokens: list[Token]) -> None:
    indices = [i for i, tok in enumerate(tokens) if tok.end > match.start and tok.start < match.end]
    match.first_token = indices[0]
    match.last_token = indices[-1]


def _find_matches(text: str, tokens: list[Token]) -> list[TermMatch]:
    words = {tok.word for tok in tokens}
    found: list[TermMatch] = []

    for pattern, category in lexicon.MERCHANT_PATTERNS.items():
        if words.intersection(lexicon.MERCHANT_EXCLUSIONS.get(pattern, ())):
            continue
        for m in _term_pattern(pattern).finditer(text):
            found.append(TermMatch(category, pattern, "merchant", m.start(), m.end()))

    for category, keywords in lexicon.CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            for m in _term_pattern(keyword).finditer(text):
                found.append(TermMatch(category, keyword, "keyword", m.start(), m.end()))

    # "whole foods" must not also count as "food"
    kept = [
        a
        for a in found
        if not any(b.length > a.length and b.start <= a.start and a.end <= b.end for b in found)
    ]
    for match in kept:
        _locate(match, tokens)
    return kept


def _phrase_ends(words: list[str], phrase: str) -> list[int]:
    parts = phrase.split()
    size = len(parts)
    return [i + size - 1 for i in range(len(words) - size + 1) if words[i : i + size] == parts]


def _modifier_factor(match: TermMatch, words: list[str]) -> tuple[float, str | None]:
    best: tuple[int, int, float, str] | None = None
    groups = (
        (lexicon.INCIDENTAL_MODIFIERS, lexicon.INCIDENTAL_FACTOR, "incidental"),
        (lexicon.SETTING_MODIFIERS, lexicon.SETTING_FACTOR, "setting"),
        (lexicon.BOOSTING_MODIFIERS, lexicon.BOOSTING_FACTOR, "booster"),
    )
    for phrases, factor, label in groups:
        for phrase in phrases:
            for end in _phrase_ends(words, phrase):
                gap = match.first_token - end - 1
                if 0 <= gap <= lexicon.MODIFIER_GAP:
                    candidate = (end, len(phrase), factor, label)
                    if best is None or candidate[:2] > best[:2]:
                        best = candidate
    if best is None:
        return 1.0, None
    return best[2], best[3]


def _verb_factor(match: TermMatch, words: list[str]) -> tuple[float, str | None]:
    nearby: set[str] = set()
    for index, word in enumerate(words):
        category = lexicon.ACTION_VERBS.get(word)
        if category is None or match.first_token <= index <= match.last_token:
            continue
        distance = min(abs(index - match.first_token), abs(index - match.last_token))
        if distance <= lexicon.VERB_WINDOW:
            nearby.add(category)
    if match.category in nearby:
        return lexicon.ALIGNED_VERB_FACTOR, "action"
    if nearby:
        return lexicon.CONFLICTING_VERB_FACTOR, None
    return 1.0, None


def _score_match(match: TermMatch, text: str, words: list[str]) -> None:
    if match.kind == "merchant":
        base = lexicon.MERCHANT_WEIGHT
    else:
        base = max(1.0, len(match.term) / 5)

    position = 1.0 + 0.25 * (1.0 - match.start / max(len(text), 1))
    verb, verb_evidence = _verb_factor(match, words)
    modifier, modifier_label = _modifier_factor(match, words)

    match.score = base * position * verb * modifier
    match.evidence = {match.kind}
    if verb_evidence:
        match.evidence.add(verb_evidence)
    if modifier_label == "booster":
        match.evidence.add("booster")


def score_description(description: str) -> KeywordScores:
    text = normalize(description)
    tokens = tokenize(text)
    words = [tok.word for tok in tokens]
    matches = _find_matches(text, tokens)

    scores: dict[str, float] = {}
    evidence: dict[str, set[str]] = {}
    for match in matches:
        _score_match(match, text, words)
        scores[match.category] = scores.get(match.category, 0.0) + match.score
        evidence.setdefault(match.category, set()).update(match.evidence)

    return KeywordScores(text=text, scores=scores, evidence=evidence, matches=matches)


def confidence_from_scores(scores: KeywordScores) -> float:
    ranked = [item for item in scores.ranked() if item[1] > 0]
    if not ranked:
        return MIN_CONFIDENCE

    best_category, best = ranked[0]
    runner_up = ranked[1][1] if len(ranked) > 1 else 0.0
    margin = (best - runner_up) / best
    strength = best / (best + 2.0)
    evidence_types = len(scores.evidence.get(best_category, ()))

    confidence = (
        0.25
        + 0.45 * margin
        + 0.25 * strength
        + 0.08 * max(evidence_types - 1, 0)
        - 0.04 * len(ranked)
    )
    return round(max(MIN_CONFIDENCE, min(confidence, MAX_CONFIDENCE)), 2)


def classify_keywords(description: str) -> ClassificationResult:
    scores = score_description(description)
    ranked = [item for item in scores.ranked() if item[1] > 0]

    if not ranked:
        return ClassificationResult(
            category=OTHER_CATEGORY,
            confidence=MIN_CONFIDENCE,
            source=ClassificationSource.FALLBACK,
            reasoning="No keyword matches found",
        )

    category = ranked[0][0]
    confidence = confidence_from_scores(scores)
    winning = sorted(
        (m for m in scores.matches if m.category == category), key=lambda m: m.score, reverse=True
    )
    merchants = [m.term for m in winning if m.kind == "merchant"]
    keywords = [m.term for m in winning if m.kind == "keyword"]

    if merchants:
        source = ClassificationSource.MERCHANT
        reasoning = f"Matched merchant pattern: {merchants[0]}"
    else:
        source = ClassificationSource.KEYWORD
        reasoning = f"Matched keywords: {', '.join(keywords[:3])}"

    suppressed = sorted({m.category for m in scores.matches if m.category != category})
    if suppressed:
        reasoning += f" (outscored: {', '.join(suppressed)})"

    logger.debug("Keyword scores for %r: %s", scores.text, scores.scores)
    return ClassificationResult(
        category=category, confidence=confidence, source=source, reasoning=reasoning
    )

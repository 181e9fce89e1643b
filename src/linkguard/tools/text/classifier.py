"""Page-text classification: scam keywords, phishing patterns, legitimacy density."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Any

from linkguard.domain.lexicon.models import Lexicon

logger = logging.getLogger(__name__)

SENTIMENT_WEIGHTS: dict[str, float] = {
    "urgent": -0.8,
    "limited time": -0.7,
    "act now": -0.9,
    "free money": -0.9,
    "guaranteed": -0.6,
    "risk free": -0.5,
    "exclusive": -0.4,
    "winner": -0.3,
    "claim now": -0.8,
    "verify account": -0.7,
    "suspended": -0.8,
    "expired": -0.6,
    "safe": 0.5,
    "secure": 0.6,
    "trusted": 0.7,
    "verified": 0.6,
    "official": 0.5,
}

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_NON_VOWELS = re.compile(r"[^aeiouy]")


@dataclass(frozen=True)
class ContentClassification:
    scam_keyword_hits: list[str] = field(default_factory=list)
    phishing_pattern_hits: list[str] = field(default_factory=list)
    legitimacy_score: float = 0.0
    sentiment_score: float = 0.0
    readability_score: float = 0.0
    word_count: int = 0

    @property
    def is_text_safe(self) -> bool:
        return not self.scam_keyword_hits

    def metrics(self) -> dict[str, Any]:
        return {
            "scam_keyword_hits": list(self.scam_keyword_hits),
            "phishing_pattern_hits": list(self.phishing_pattern_hits),
            "legitimacy_score": round(self.legitimacy_score, 4),
            "sentiment_score": round(self.sentiment_score, 4),
            "readability_score": round(self.readability_score, 4),
            "word_count": self.word_count,
        }


def sentiment_score(text: str) -> float:
    raw = (text or "").lower()
    weights = [value for key, value in SENTIMENT_WEIGHTS.items() if key in raw]
    if not weights:
        return 0.0
    return max(-1.0, min(1.0, sum(weights) / len(weights)))


def count_words(text: str) -> int:
    return len((text or "").split())


def _sentences(text: str) -> list[str]:
    parts = (item.strip() for item in _SENTENCE_SPLIT.split(text or ""))
    return [item for item in parts if len(item) > 10][:20]


def readability_score(text: str) -> float:
    """Flesch reading-ease approximation scaled to [0, 1].

    Words and syllables are counted over the same sampled sentences.
    """

    sample = _sentences(text)
    joined = " ".join(sample)
    words = count_words(joined)
    if not sample or words == 0:
        return 0.0
    sentences = len(sample)
    syllables = len(_NON_VOWELS.sub("", joined.lower()))
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)
    return max(0.0, min(100.0, score)) / 100.0


def classify_text(text: str, lexicon: Lexicon) -> ContentClassification:
    normalized = (text or "").lower().strip()
    result = ContentClassification(
        scam_keyword_hits=lexicon.match_scam_keywords(normalized),
        phishing_pattern_hits=lexicon.match_spam_patterns(normalized),
        legitimacy_score=lexicon.legitimacy_score(normalized),
        sentiment_score=sentiment_score(normalized),
        readability_score=readability_score(text),
        word_count=count_words(text),
    )
    if result.scam_keyword_hits:
        logger.info("Scam keywords found in page text: %s", ", ".join(result.scam_keyword_hits))
    return result

"""Text classification against the lexicon."""

from linkguard.tools.text.classifier import (
    SENTIMENT_WEIGHTS,
    ContentClassification,
    classify_text,
    count_words,
    readability_score,
    sentiment_score,
)

__all__ = [
    "SENTIMENT_WEIGHTS",
    "ContentClassification",
    "classify_text",
    "count_words",
    "readability_score",
    "sentiment_score",
]

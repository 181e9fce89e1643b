"""Immutable lexicon container."""

from __future__ import annotations

from dataclasses import dataclass, field
import re


@dataclass(frozen=True)
class Lexicon:
    spam_keywords: frozenset[str] = frozenset()
    scam_keywords: frozenset[str] = frozenset()
    legitimate_terms: frozenset[str] = frozenset()
    spam_patterns: tuple[re.Pattern[str], ...] = ()
    suspicious_sender_patterns: tuple[re.Pattern[str], ...] = ()
    load_warnings: tuple[str, ...] = field(default=(), compare=False)

    def match_spam_keywords(self, text: str) -> list[str]:
        raw = (text or "").lower()
        return sorted(item for item in self.spam_keywords if item in raw)

    def match_scam_keywords(self, text: str) -> list[str]:
        """Scam and spam keywords found in free page text."""

        raw = (text or "").lower()
        return sorted(item for item in self.scam_keywords | self.spam_keywords if item in raw)

    def match_legitimate_terms(self, text: str) -> list[str]:
        raw = (text or "").lower()
        return sorted(item for item in self.legitimate_terms if item in raw)

    def legitimacy_score(self, text: str) -> float:
        if not self.legitimate_terms:
            return 0.0
        matched = len(self.match_legitimate_terms(text))
        return min(1.0, matched / len(self.legitimate_terms) * 2)

    def match_spam_patterns(self, text: str) -> list[str]:
        raw = text or ""
        return [f"Pattern: {pattern.pattern}" for pattern in self.spam_patterns if pattern.search(raw)]

    def is_suspicious_sender(self, sender: str) -> bool:
        raw = (sender or "").strip().lower()
        return any(pattern.search(raw) for pattern in self.suspicious_sender_patterns)

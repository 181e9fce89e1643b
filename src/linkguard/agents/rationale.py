"""Natural-language explanations for finished verdicts.

The generator only decorates a result. Scores and booleans are never touched,
and any provider failure falls back to the deterministic message already on
the record.
"""

from __future__ import annotations

import logging
from typing import Protocol

from linkguard.agents.prompts import SPAM_RATIONALE_PROMPT, URL_RATIONALE_PROMPT
from linkguard.domain.email.models import SpamAnalysis
from linkguard.domain.url.models import UrlAnalysis

logger = logging.getLogger(__name__)

MAX_BODY_EXCERPT = 1000


class RationaleProvider(Protocol):
    def complete(self, prompt: str) -> str: ...


class RationaleGenerator:
    def __init__(self, provider: RationaleProvider | None = None) -> None:
        self.provider = provider

    def explain_url(self, analysis: UrlAnalysis) -> str:
        prompt = URL_RATIONALE_PROMPT.format(
            url=analysis.url,
            message=analysis.safety_message,
            is_secure=analysis.is_secure,
            is_safe_from_scams=analysis.is_safe_from_scams,
            is_text_safe=analysis.is_text_safe,
            description=analysis.description,
        )
        return self._complete(prompt, fallback=analysis.safety_message)

    def explain_spam(self, analysis: SpamAnalysis, subject: str, body: str, sender: str) -> str:
        prompt = SPAM_RATIONALE_PROMPT.format(
            sender=sender or "",
            subject=subject or "",
            is_spam=analysis.is_spam,
            is_high_risk=analysis.is_high_risk,
            spam_score=analysis.spam_score,
            reason=analysis.spam_reason,
            keywords=", ".join(analysis.detected_spam_keywords) or "none",
            body=(body or "")[:MAX_BODY_EXCERPT],
        )
        return self._complete(prompt, fallback=analysis.spam_reason)

    def _complete(self, prompt: str, *, fallback: str) -> str:
        if self.provider is None:
            return fallback
        try:
            text = self.provider.complete(prompt)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Rationale provider failed, using fallback: %s", exc)
            return fallback
        text = (text or "").strip()
        return text or fallback

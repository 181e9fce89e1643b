"""Weighted email spam scoring with recursive link analysis.

Score contributions (summed, then clamped to [0, 1]):

    0.125 per spam keyword        0.100 per spam pattern
    0.150 suspicious sender       0.075 * (1 - sender reputation)
    0.150 * (1 - legitimacy)      url penalty (capped at 0.20)
    0.025 body under 50 chars     0.025 subject over 100 chars
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from typing import Any, Iterable

from linkguard.config.settings import SpamSettings
from linkguard.core.errors import InputError
from linkguard.domain.email.models import BulkSpamAnalysis, EmailSpamRequest, LinkResult, SpamAnalysis
from linkguard.domain.lexicon.models import Lexicon
from linkguard.domain.url.extract import extract_urls
from linkguard.orchestrator.url_analyzer import UrlAnalyzer

logger = logging.getLogger(__name__)

FREE_MAIL_DOMAINS = ("@gmail.com", "@yahoo.com", "@hotmail.com", "@outlook.com")
NO_INDICATORS_REASON = "No specific spam indicators detected"

SAFE_LINK_SCORE = 0.8
UNSAFE_LINK_SCORE = 0.2
FAILED_LINK_SCORE = 0.0


@dataclass(frozen=True)
class SpamPolicy:
    spam_threshold: float = 0.6
    high_risk_threshold: float = 0.8
    max_spam_keywords: int = 3
    max_spam_patterns: int = 2
    high_risk_keywords: int = 5
    max_bulk_emails: int = 100
    max_links_per_email: int = 20
    link_concurrency: int = 4

    @classmethod
    def from_settings(cls, settings: SpamSettings) -> "SpamPolicy":
        return cls(**settings.model_dump())


def sender_reputation(sender: str) -> float:
    key = (sender or "").strip().lower()
    if any(domain in key for domain in FREE_MAIL_DOMAINS):
        return 0.8
    if "@" in key and "." in key:
        return 0.5
    return 0.1


def url_penalty(link_results: list[LinkResult]) -> float:
    if not link_results:
        return 0.0
    unsafe = sum(1 for item in link_results if not item.is_safe)
    penalty = 0.2 * unsafe
    if unsafe * 2 > len(link_results):
        penalty += 0.1
    return min(0.2, penalty)


def compute_spam_score(
    *,
    keyword_count: int,
    pattern_count: int,
    suspicious_sender: bool,
    sender_reputation: float,
    legitimacy_score: float,
    link_results: list[LinkResult],
    content_length: int,
    subject_length: int,
) -> float:
    score = 0.0
    score += 0.125 * keyword_count
    score += 0.100 * pattern_count
    score += 0.150 if suspicious_sender else 0.0
    score += 0.075 * (1.0 - sender_reputation)
    score += 0.150 * (1.0 - legitimacy_score)
    score += url_penalty(link_results)
    score += 0.025 if content_length < 50 else 0.0
    score += 0.025 if subject_length > 100 else 0.0
    return max(0.0, min(1.0, score))


def build_spam_reason(
    *,
    keywords: list[str],
    patterns: list[str],
    suspicious_sender: bool,
    link_results: list[LinkResult],
    high_score: bool,
) -> str:
    reasons: list[str] = []
    if keywords:
        reasons.append("Contains suspicious keywords: " + ", ".join(keywords))
    if patterns:
        reasons.append("Matches spam patterns")
    if suspicious_sender:
        reasons.append("Suspicious sender address")
    unsafe = sum(1 for item in link_results if not item.is_safe)
    if unsafe:
        reasons.append(f"Contains {unsafe} unsafe link(s)")
    if high_score:
        reasons.append("High spam probability score")
    return "; ".join(reasons) if reasons else NO_INDICATORS_REASON


class SpamAnalyzer:
    def __init__(self, *, lexicon: Lexicon, url_analyzer: UrlAnalyzer, policy: SpamPolicy | None = None) -> None:
        self.lexicon = lexicon
        self.url_analyzer = url_analyzer
        self.policy = policy or SpamPolicy()
        self._links = ThreadPoolExecutor(max_workers=self.policy.link_concurrency, thread_name_prefix="spam-link")

    def close(self) -> None:
        self._links.shutdown(wait=False, cancel_futures=True)

    def spam_keywords(self) -> list[str]:
        return sorted(self.lexicon.spam_keywords)

    def analyze_request(self, request: EmailSpamRequest) -> SpamAnalysis:
        return self.analyze(request.subject, request.content, request.sender, request.recipient)

    def analyze(self, subject: str | None, body: str | None, sender: str | None, recipient: str | None = None) -> SpamAnalysis:
        subject = subject or ""
        body = body or ""
        sender_key = (sender or "").strip().lower()
        full_text = f"{subject} {body}".lower()

        keywords = self.lexicon.match_spam_keywords(full_text)
        patterns = self.lexicon.match_spam_patterns(full_text)
        suspicious_sender = self.lexicon.is_suspicious_sender(sender_key)
        legitimacy = self.lexicon.legitimacy_score(full_text)
        reputation = sender_reputation(sender_key)
        urls = extract_urls(body, limit=self.policy.max_links_per_email)
        link_results = self._analyze_links(urls)

        score = compute_spam_score(
            keyword_count=len(keywords),
            pattern_count=len(patterns),
            suspicious_sender=suspicious_sender,
            sender_reputation=reputation,
            legitimacy_score=legitimacy,
            link_results=link_results,
            content_length=len(body),
            subject_length=len(subject),
        )
        is_high_risk = score > self.policy.high_risk_threshold or len(keywords) > self.policy.high_risk_keywords
        is_spam = (
            score > self.policy.spam_threshold
            or len(keywords) > self.policy.max_spam_keywords
            or len(patterns) > self.policy.max_spam_patterns
            or is_high_risk
        )
        metrics: dict[str, Any] = {
            "keyword_count": len(keywords),
            "pattern_count": len(patterns),
            "suspicious_sender": suspicious_sender,
            "legitimacy_score": round(legitimacy, 4),
            "sender_reputation": reputation,
            "content_length": len(body),
            "subject_length": len(subject),
            "urls_found": len(urls),
        }
        reason = build_spam_reason(
            keywords=keywords,
            patterns=patterns,
            suspicious_sender=suspicious_sender,
            link_results=link_results,
            high_score=score > self.policy.high_risk_threshold,
        )
        logger.info("Spam analysis for sender %r: score=%.3f spam=%s high_risk=%s", sender_key, score, is_spam, is_high_risk)
        return SpamAnalysis(
            is_spam=is_spam,
            is_high_risk=is_high_risk,
            spam_score=score,
            detected_spam_keywords=keywords,
            detected_patterns=patterns,
            analysis_metrics=metrics,
            link_analysis_results=link_results,
            spam_reason=reason,
        )

    def analyze_bulk(self, requests: Iterable[EmailSpamRequest]) -> BulkSpamAnalysis:
        items = list(requests)
        if len(items) > self.policy.max_bulk_emails:
            raise InputError(f"Too many emails: {len(items)} exceeds the limit of {self.policy.max_bulk_emails}")
        results = [self.analyze_request(item) for item in items]
        total = len(results)
        return BulkSpamAnalysis(
            results=results,
            total=total,
            spam_count=sum(1 for item in results if item.is_spam),
            high_risk_count=sum(1 for item in results if item.is_high_risk),
            average_score=(sum(item.spam_score for item in results) / total) if total else 0.0,
        )

    def is_high_priority_spam(self, subject: str | None, body: str | None, sender: str | None) -> bool:
        analysis = self.analyze(subject, body, sender, "")
        return analysis.is_high_risk or analysis.spam_score > self.policy.high_risk_threshold

    def _analyze_links(self, urls: list[str]) -> list[LinkResult]:
        if not urls:
            return []
        return list(self._links.map(self._analyze_link, urls))

    def _analyze_link(self, url: str) -> LinkResult:
        try:
            analysis = self.url_analyzer.analyze(url)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Link analysis failed for %s: %s", url, exc)
            return LinkResult(
                url=url,
                is_safe=False,
                safety_message=f"URL analysis failed: {exc}",
                safety_score=FAILED_LINK_SCORE,
            )
        return LinkResult(
            url=url,
            is_safe=analysis.overall_safe,
            safety_message=analysis.safety_message,
            safety_score=SAFE_LINK_SCORE if analysis.overall_safe else UNSAFE_LINK_SCORE,
        )

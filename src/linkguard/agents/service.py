"""Caller-facing safety service: website checks, email checks and job tracking."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from linkguard import __version__
from linkguard.agents.rationale import RationaleGenerator
from linkguard.core.errors import InputError
from linkguard.domain.email.models import BulkSpamAnalysis, EmailSpamRequest, SpamAnalysis
from linkguard.domain.lexicon.models import Lexicon
from linkguard.domain.url.models import UrlAnalysis
from linkguard.orchestrator.jobs import JobPoll, JobRegistry
from linkguard.orchestrator.spam_analyzer import SpamAnalyzer
from linkguard.orchestrator.url_analyzer import UrlSafetyAnalyzer

logger = logging.getLogger(__name__)


def _require_url(url: str | None) -> str:
    value = (url or "").strip()
    if not value:
        raise InputError("URL is required")
    return value


def _as_request(item: EmailSpamRequest | Mapping[str, Any]) -> EmailSpamRequest:
    if isinstance(item, EmailSpamRequest):
        return item
    return EmailSpamRequest.model_validate(dict(item))


class SafetyService:
    def __init__(
        self,
        *,
        lexicon: Lexicon,
        url_analyzer: UrlSafetyAnalyzer,
        spam_analyzer: SpamAnalyzer,
        jobs: JobRegistry,
        rationale: RationaleGenerator | None = None,
        rationale_enabled: bool = False,
        max_bulk_urls: int = 20,
        runtime: dict[str, Any] | None = None,
    ) -> None:
        self.lexicon = lexicon
        self.url_analyzer = url_analyzer
        self.spam_analyzer = spam_analyzer
        self.jobs = jobs
        self.rationale = rationale or RationaleGenerator()
        self.rationale_enabled = rationale_enabled
        self.max_bulk_urls = max_bulk_urls
        self.runtime = dict(runtime or {})

    def _want_rationale(self, include_rationale: bool | None) -> bool:
        return self.rationale_enabled if include_rationale is None else include_rationale

    def check_website(self, url: str | None, *, include_rationale: bool | None = None) -> UrlAnalysis:
        analysis = self.url_analyzer.analyze(_require_url(url))
        if self._want_rationale(include_rationale):
            analysis = analysis.model_copy(update={"rationale": self.rationale.explain_url(analysis)})
        return analysis

    def check_websites(self, urls: Iterable[str | None], *, include_rationale: bool | None = None) -> list[UrlAnalysis]:
        items = [_require_url(item) for item in urls]
        if len(items) > self.max_bulk_urls:
            raise InputError(f"Too many URLs: {len(items)} exceeds the limit of {self.max_bulk_urls}")
        futures = [self.url_analyzer.analyze_async(item) for item in items]
        results = [future.result() for future in futures]
        if self._want_rationale(include_rationale):
            results = [
                item.model_copy(update={"rationale": self.rationale.explain_url(item)}) for item in results
            ]
        return results

    def submit_website(self, url: str | None) -> str:
        return self.jobs.submit(_require_url(url))

    def poll_website(self, tracking_id: str) -> JobPoll:
        return self.jobs.poll(tracking_id)

    def cancel_website(self, tracking_id: str) -> bool:
        return self.jobs.cancel(tracking_id)

    def check_email(
        self,
        subject: str | None,
        content: str | None,
        sender: str | None,
        recipient: str | None = None,
        *,
        include_rationale: bool | None = None,
    ) -> SpamAnalysis:
        if not (sender or "").strip():
            raise InputError("Sender is required")
        analysis = self.spam_analyzer.analyze(subject, content, sender, recipient)
        if self._want_rationale(include_rationale):
            text = self.rationale.explain_spam(analysis, subject or "", content or "", sender or "")
            analysis = analysis.model_copy(update={"rationale": text})
        return analysis

    def check_emails(self, requests: Iterable[EmailSpamRequest | Mapping[str, Any]]) -> BulkSpamAnalysis:
        items = [_as_request(item) for item in requests]
        return self.spam_analyzer.analyze_bulk(items)

    def quick_check(self, subject: str | None, content: str | None, sender: str | None) -> bool:
        return self.spam_analyzer.is_high_priority_spam(subject, content, sender)

    def spam_keywords(self) -> list[str]:
        return self.spam_analyzer.spam_keywords()

    def health(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "pending_jobs": self.jobs.pending_count(),
            "rationale_enabled": self.rationale_enabled,
            "runtime": dict(self.runtime),
            "lexicon": {
                "spam_keywords": len(self.lexicon.spam_keywords),
                "scam_keywords": len(self.lexicon.scam_keywords),
                "legitimate_terms": len(self.lexicon.legitimate_terms),
                "spam_patterns": len(self.lexicon.spam_patterns),
                "suspicious_sender_patterns": len(self.lexicon.suspicious_sender_patterns),
                "warnings": list(self.lexicon.load_warnings),
            },
        }

    def close(self) -> None:
        self.jobs.shutdown()
        self.spam_analyzer.close()
        self.url_analyzer.close()

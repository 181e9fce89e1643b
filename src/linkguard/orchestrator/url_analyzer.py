"""URL safety analysis: transport, reputation and page content in parallel."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading
from typing import Any, Protocol

from linkguard.domain.lexicon.models import Lexicon
from linkguard.domain.url.extract import canonicalize_url, is_parseable_https
from linkguard.domain.url.models import UrlAnalysis
from linkguard.orchestrator.fusion import SafetyWeights, score_website
from linkguard.tools.reputation.client import ReputationProvider, ReputationVerdict
from linkguard.tools.text.classifier import ContentClassification, classify_text
from linkguard.tools.transport.tls import TransportReport
from linkguard.tools.url_fetch.service import FAILED_DESCRIPTION, FetchResult, PageFetcher

logger = logging.getLogger(__name__)

INSECURE_MESSAGE = "Website is potentially unsafe due to lack of HTTPS or an invalid certificate."
FLAGGED_MESSAGE = "Website is potentially unsafe: flagged as malicious or suspicious by the reputation service."
CONTENT_MESSAGE = "Website is potentially unsafe: suspicious content detected on the page."
SAFE_MESSAGE = "Website is likely safe."


class TransportChecker(Protocol):
    def inspect(self, url: str) -> TransportReport: ...


class UrlAnalyzer(Protocol):
    def analyze(self, url: str, cancel_event: threading.Event | None = None) -> UrlAnalysis: ...


def safety_message(is_secure: bool, is_safe_from_scams: bool, is_text_safe: bool) -> str:
    if not is_secure:
        return INSECURE_MESSAGE
    if not is_safe_from_scams:
        return FLAGGED_MESSAGE
    if not is_text_safe:
        return CONTENT_MESSAGE
    return SAFE_MESSAGE


def failed_analysis(url: str, reason: str) -> UrlAnalysis:
    """All-unsafe result used when an analysis could not run at all."""

    return UrlAnalysis(
        url=url,
        description="N/A",
        is_secure=False,
        is_safe_from_scams=False,
        is_text_safe=False,
        safety_message=safety_message(False, False, False),
        additional_info={"error": reason},
    )


class UrlSafetyAnalyzer:
    def __init__(
        self,
        *,
        lexicon: Lexicon,
        reputation: ReputationProvider,
        transport: TransportChecker,
        fetcher: PageFetcher,
        max_workers: int = 8,
        weights: SafetyWeights | None = None,
    ) -> None:
        self.lexicon = lexicon
        self.reputation = reputation
        self.transport = transport
        self.fetcher = fetcher
        self.weights = weights or SafetyWeights()
        # Legs never wait on other futures, so they get their own pool.
        self._legs = ThreadPoolExecutor(max_workers=max(3, max_workers * 3), thread_name_prefix="url-leg")
        self._tasks = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="url-task")

    def analyze_async(self, url: str, cancel_event: threading.Event | None = None) -> Future[UrlAnalysis]:
        return self._tasks.submit(self.analyze, url, cancel_event)

    def analyze(self, url: str, cancel_event: threading.Event | None = None) -> UrlAnalysis:
        raw = (url or "").strip()
        if not is_parseable_https(raw):
            logger.info("Rejecting URL without a parseable https address: %r", raw)
            return UrlAnalysis(
                url=raw,
                description="N/A",
                safety_message=INSECURE_MESSAGE,
                additional_info={"rejected": "not_https"},
            )
        target = canonicalize_url(raw)
        try:
            return self._analyze(target, cancel_event)
        except Exception as exc:  # noqa: BLE001
            logger.exception("URL analysis failed for %s", target)
            return failed_analysis(target, f"{type(exc).__name__}: {exc}")

    def close(self) -> None:
        self._tasks.shutdown(wait=False, cancel_futures=True)
        self._legs.shutdown(wait=False, cancel_futures=True)

    def _analyze(self, url: str, cancel_event: threading.Event | None) -> UrlAnalysis:
        transport_future = self._legs.submit(self._transport_leg, url)
        reputation_future = self._legs.submit(self._reputation_leg, url, cancel_event)
        fetch_future = self._legs.submit(self._fetch_leg, url)

        transport = transport_future.result()
        verdict = reputation_future.result()
        page = fetch_future.result()
        classification = self._classify(page)

        is_secure = transport.is_secure
        is_safe_from_scams = verdict.is_clean
        is_text_safe = page.ok and classification is not None and classification.is_text_safe

        info: dict[str, Any] = {
            "transport": {
                "scheme_ok": transport.scheme_ok,
                "chain_length": transport.chain_length,
                "all_valid": transport.all_valid,
                "error": transport.error,
            },
            "reputation": verdict.model_dump(),
            "content": {
                "fetched": page.ok,
                "title": page.title,
                "status_code": page.status_code,
                "error": page.error,
                **(classification or ContentClassification()).metrics(),
            },
        }
        info["safety_score"] = score_website(
            is_secure=is_secure,
            reputation=info["reputation"],
            content=info["content"],
            weights=self.weights,
        ).model_dump()

        analysis = UrlAnalysis(
            url=url,
            description=page.description,
            is_secure=is_secure,
            is_safe_from_scams=is_safe_from_scams,
            is_text_safe=is_text_safe,
            safety_message=safety_message(is_secure, is_safe_from_scams, is_text_safe),
            additional_info=info,
        )
        logger.info(
            "Analyzed %s: secure=%s scams_safe=%s text_safe=%s",
            url,
            is_secure,
            is_safe_from_scams,
            is_text_safe,
        )
        return analysis

    def _transport_leg(self, url: str) -> TransportReport:
        try:
            return self.transport.inspect(url)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Transport check crashed for %s: %s", url, exc)
            return TransportReport(url=url, scheme_ok=False, error=f"{type(exc).__name__}: {exc}")

    def _reputation_leg(self, url: str, cancel_event: threading.Event | None) -> ReputationVerdict:
        try:
            return self.reputation.reputation(url, cancel_event=cancel_event)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Reputation lookup crashed for %s: %s", url, exc)
            return ReputationVerdict(status="failed", error=f"{type(exc).__name__}: {exc}")

    def _fetch_leg(self, url: str) -> FetchResult:
        try:
            return self.fetcher.fetch(url)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Page fetch crashed for %s: %s", url, exc)
            return FetchResult(url=url, ok=False, description=FAILED_DESCRIPTION, error=f"{type(exc).__name__}: {exc}")

    def _classify(self, page: FetchResult) -> ContentClassification | None:
        if not page.ok:
            return None
        try:
            return classify_text(page.text, self.lexicon)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Content classification crashed for %s: %s", page.url, exc)
            return None

from __future__ import annotations

import threading

import pytest

from linkguard.domain.lexicon import load_lexicon
from linkguard.orchestrator.spam_analyzer import SpamAnalyzer, SpamPolicy
from linkguard.orchestrator.url_analyzer import UrlSafetyAnalyzer
from linkguard.tools.reputation.client import ReputationVerdict
from linkguard.tools.transport.tls import TransportReport
from linkguard.tools.url_fetch.service import FAILED_DESCRIPTION, FetchResult

CLEAN = ReputationVerdict(status="completed", malicious=0, suspicious=0, attempts=1)


class FakeReputation:
    def __init__(self, verdicts: dict[str, ReputationVerdict] | None = None, default: ReputationVerdict = CLEAN):
        self.verdicts = verdicts or {}
        self.default = default
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def reputation(self, url, cancel_event=None):
        with self._lock:
            self.calls.append(url)
        return self.verdicts.get(url, self.default)


class BlockingReputation:
    """Holds every lookup until ``release`` is set or the caller cancels."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.started = threading.Event()
        self.cancelled = threading.Event()

    def reputation(self, url, cancel_event=None):
        self.started.set()
        while not self.release.wait(0.01):
            if cancel_event is not None and cancel_event.is_set():
                self.cancelled.set()
                return ReputationVerdict(status="failed", error="cancelled")
        return CLEAN


class FakeTransport:
    def __init__(self, insecure: set[str] | None = None) -> None:
        self.insecure = insecure or set()

    def inspect(self, url):
        if url in self.insecure:
            return TransportReport(url=url, scheme_ok=True, chain_length=1, all_valid=False)
        return TransportReport(url=url, scheme_ok=True, chain_length=2, all_valid=True)


class FakeFetcher:
    def __init__(self, pages: dict[str, str] | None = None, failing: set[str] | None = None) -> None:
        self.pages = pages or {}
        self.failing = failing or set()

    def fetch(self, url):
        if url in self.failing:
            return FetchResult(url=url, ok=False, description=FAILED_DESCRIPTION, error="network_error")
        text = self.pages.get(url, "Welcome to our company. Contact customer support for help.")
        return FetchResult(url=url, ok=True, description="Example Domain", text=text, title="Example", status_code=200)


class FakeUrlAnalyzer:
    """Stands in for the URL analyzer inside spam tests."""

    def __init__(self, unsafe: set[str] | None = None, broken: set[str] | None = None) -> None:
        self.unsafe = unsafe or set()
        self.broken = broken or set()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def analyze(self, url, cancel_event=None):
        from linkguard.domain.url.models import UrlAnalysis

        with self._lock:
            self.calls.append(url)
        if url in self.broken:
            raise RuntimeError("analysis exploded")
        safe = url not in self.unsafe
        return UrlAnalysis(
            url=url,
            is_secure=True,
            is_safe_from_scams=safe,
            is_text_safe=True,
            safety_message="Website is likely safe." if safe else "flagged",
        )


@pytest.fixture(scope="session")
def lexicon():
    return load_lexicon()


@pytest.fixture
def make_url_analyzer(lexicon):
    created: list[UrlSafetyAnalyzer] = []

    def _make(reputation=None, transport=None, fetcher=None, **kwargs) -> UrlSafetyAnalyzer:
        analyzer = UrlSafetyAnalyzer(
            lexicon=kwargs.pop("lexicon", lexicon),
            reputation=reputation or FakeReputation(),
            transport=transport or FakeTransport(),
            fetcher=fetcher or FakeFetcher(),
            max_workers=kwargs.pop("max_workers", 4),
        )
        created.append(analyzer)
        return analyzer

    yield _make
    for analyzer in created:
        analyzer.close()


@pytest.fixture
def make_spam_analyzer(lexicon):
    created: list[SpamAnalyzer] = []

    def _make(url_analyzer=None, **policy) -> SpamAnalyzer:
        analyzer = SpamAnalyzer(
            lexicon=lexicon,
            url_analyzer=url_analyzer or FakeUrlAnalyzer(),
            policy=SpamPolicy(**policy),
        )
        created.append(analyzer)
        return analyzer

    yield _make
    for analyzer in created:
        analyzer.close()

"""Process-wide registry of background URL analyses keyed by tracking id."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
import logging
import threading
from typing import Callable, Literal
import uuid

from pydantic import BaseModel

from linkguard.domain.url.models import UrlAnalysis
from linkguard.orchestrator.url_analyzer import UrlAnalyzer, failed_analysis

logger = logging.getLogger(__name__)

TRACKING_PREFIX = "track_"


def new_tracking_id() -> str:
    return f"{TRACKING_PREFIX}{uuid.uuid4().hex}"


class JobPoll(BaseModel):
    tracking_id: str
    status: Literal["pending", "done", "missing"]
    result: UrlAnalysis | None = None


@dataclass
class _JobEntry:
    url: str
    future: Future[UrlAnalysis]
    cancel_event: threading.Event


class JobRegistry:
    """Submit, poll and cancel URL analyses.

    An entry is created on submit and evicted either by the first poll that
    sees it finished or by cancel. Entries are lost on restart.
    """

    def __init__(
        self,
        analyzer: UrlAnalyzer,
        max_workers: int = 8,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.analyzer = analyzer
        self._id_factory = id_factory or new_tracking_id
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="url-job")
        self._lock = threading.Lock()
        self._jobs: dict[str, _JobEntry] = {}

    def submit(self, url: str) -> str:
        cancel_event = threading.Event()
        with self._lock:
            tracking_id = self._id_factory()
            while tracking_id in self._jobs:
                tracking_id = self._id_factory()
            future = self._executor.submit(self._run, url, cancel_event)
            self._jobs[tracking_id] = _JobEntry(url=url, future=future, cancel_event=cancel_event)
        logger.info("Submitted URL analysis %s for %s", tracking_id, url)
        return tracking_id

    def poll(self, tracking_id: str) -> JobPoll:
        with self._lock:
            entry = self._jobs.get(tracking_id)
            if entry is None:
                return JobPoll(tracking_id=tracking_id, status="missing")
            if not entry.future.done():
                return JobPoll(tracking_id=tracking_id, status="pending")
            del self._jobs[tracking_id]
        return JobPoll(tracking_id=tracking_id, status="done", result=entry.future.result())

    def cancel(self, tracking_id: str) -> bool:
        with self._lock:
            entry = self._jobs.pop(tracking_id, None)
        if entry is None:
            return False
        entry.cancel_event.set()
        entry.future.cancel()
        logger.info("Cancelled URL analysis %s", tracking_id)
        return True

    def pending_count(self) -> int:
        with self._lock:
            return len(self._jobs)

    def shutdown(self, wait: bool = False) -> None:
        with self._lock:
            entries = list(self._jobs.values())
            self._jobs.clear()
        for entry in entries:
            entry.cancel_event.set()
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _run(self, url: str, cancel_event: threading.Event) -> UrlAnalysis:
        try:
            return self.analyzer.analyze(url, cancel_event=cancel_event)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Background analysis failed for %s", url)
            return failed_analysis(url, f"{type(exc).__name__}: {exc}")

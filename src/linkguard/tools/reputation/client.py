"""Reputation provider client with bounded analysis polling.

The provider is asked to scan a URL (``POST /urls``), answers with a scan
handle, and the client then polls ``GET /analyses/<handle>`` until the
analysis completes, reaches another terminal status, or the attempt cap is
hit. Every non-completed outcome is reported as ``status="failed"``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict
import requests

from linkguard.config.settings import ReputationSettings
from linkguard.core.errors import ReputationError

logger = logging.getLogger(__name__)

_PENDING_STATUSES = {"queued", "in-progress"}


@dataclass(frozen=True)
class ReputationPolicy:
    api_key: str | None = None
    base_url: str = "https://www.virustotal.com/api/v3"
    poll_delay_ms: int = 3000
    max_attempts: int = 5
    request_timeout_ms: int = 15000

    @classmethod
    def from_settings(cls, settings: ReputationSettings) -> "ReputationPolicy":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url.rstrip("/"),
            poll_delay_ms=settings.poll_delay_ms,
            max_attempts=settings.max_attempts,
            request_timeout_ms=settings.request_timeout_ms,
        )


class ReputationVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["completed", "failed"]
    malicious: int = 0
    suspicious: int = 0
    attempts: int = 0
    error: str | None = None

    @property
    def is_clean(self) -> bool:
        return self.status == "completed" and self.malicious == 0 and self.suspicious == 0


class ReputationProvider(Protocol):
    def reputation(self, url: str, cancel_event: threading.Event | None = None) -> ReputationVerdict: ...


def _dig(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            raise ReputationError("malformed_response", f"missing field {'.'.join(keys)}")
        current = current[key]
    return current


def _as_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ReputationError("malformed_response", f"stats.{name} is not an integer")
    return value


class ReputationClient:
    """Shared client; one instance per process so the provider budget is pooled."""

    def __init__(self, policy: ReputationPolicy, session: requests.Session | None = None) -> None:
        self.policy = policy
        self._session = session or requests.Session()

    def reputation(self, url: str, cancel_event: threading.Event | None = None) -> ReputationVerdict:
        attempts = 0
        try:
            if not self.policy.api_key:
                raise ReputationError("missing_api_key")
            handle = self._submit(url)
            while attempts < self.policy.max_attempts:
                if self._wait(cancel_event):
                    raise ReputationError("cancelled")
                attempts += 1
                payload = self._request_json("GET", f"{self.policy.base_url}/analyses/{handle}")
                status = str(_dig(payload, "data", "attributes", "status"))
                if status == "completed":
                    stats = _dig(payload, "data", "attributes", "stats")
                    verdict = ReputationVerdict(
                        status="completed",
                        malicious=_as_count(_dig(stats, "malicious"), "malicious"),
                        suspicious=_as_count(_dig(stats, "suspicious"), "suspicious"),
                        attempts=attempts,
                    )
                    logger.debug(
                        "Reputation for %s: malicious=%d suspicious=%d after %d polls",
                        url,
                        verdict.malicious,
                        verdict.suspicious,
                        attempts,
                    )
                    return verdict
                if status not in _PENDING_STATUSES:
                    raise ReputationError("terminal_status", f"analysis ended with status {status!r}")
            raise ReputationError("attempts_exhausted", f"analysis still pending after {attempts} polls")
        except ReputationError as exc:
            logger.warning("Reputation lookup failed for %s: %s", url, exc)
            return ReputationVerdict(status="failed", attempts=attempts, error=exc.reason)

    def _submit(self, url: str) -> str:
        payload = self._request_json("POST", f"{self.policy.base_url}/urls", data={"url": url})
        handle = _dig(payload, "data", "id")
        if not isinstance(handle, str) or not handle.strip():
            raise ReputationError("malformed_response", "empty scan handle")
        return handle

    def _wait(self, cancel_event: threading.Event | None) -> bool:
        delay_s = self.policy.poll_delay_ms / 1000.0
        if cancel_event is None:
            if delay_s > 0:
                time.sleep(delay_s)
            return False
        return cancel_event.wait(delay_s) if delay_s > 0 else cancel_event.is_set()

    def _request_json(self, method: str, url: str, data: dict[str, str] | None = None) -> Any:
        headers = {"x-apikey": self.policy.api_key or "", "Accept": "application/json"}
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self.policy.request_timeout_ms / 1000.0,
            )
        except requests.RequestException as exc:
            raise ReputationError("network_error", f"{type(exc).__name__}: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise ReputationError("http_error", f"HTTP {response.status_code} from {method} {url}")
        try:
            return response.json()
        except ValueError as exc:
            raise ReputationError("invalid_json", str(exc)) from exc

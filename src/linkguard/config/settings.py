"""Config loader from env + yaml."""

from __future__ import annotations

from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
ENV_PREFIX = "LINKGUARD_"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ReputationSettings(_Frozen):
    api_key: str | None = Field(default=None)
    base_url: str = Field(default="https://www.virustotal.com/api/v3")
    poll_delay_ms: int = Field(default=3000, ge=0)
    max_attempts: int = Field(default=5, ge=1)
    request_timeout_ms: int = Field(default=15000, gt=0)


class FetchSettings(_Frozen):
    timeout_ms: int = Field(default=10000, gt=0)
    max_bytes: int = Field(default=2_000_000, gt=0)
    max_redirects: int = Field(default=3, ge=0)
    allow_private_network: bool = Field(default=False)
    user_agent: str = Field(default="Mozilla/5.0 (compatible; LinkguardFetcher/0.1)")


class TransportSettings(_Frozen):
    timeout_ms: int = Field(default=5000, gt=0)


class SpamSettings(_Frozen):
    spam_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    high_risk_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    max_spam_keywords: int = Field(default=3, ge=0)
    max_spam_patterns: int = Field(default=2, ge=0)
    high_risk_keywords: int = Field(default=5, ge=0)
    max_bulk_emails: int = Field(default=100, ge=1)
    max_links_per_email: int = Field(default=20, ge=0)
    link_concurrency: int = Field(default=4, ge=1)


class JobSettings(_Frozen):
    max_workers: int = Field(default=8, ge=1)
    max_bulk_urls: int = Field(default=20, ge=1)


class RationaleSettings(_Frozen):
    enabled: bool = Field(default=False)
    model: str = Field(default="gpt-4.1-mini")
    api_key: str | None = Field(default=None)
    base_url: str | None = Field(default=None)
    timeout_s: float = Field(default=20.0, gt=0)


class AppConfig(_Frozen):

    reputation: ReputationSettings = Field(default_factory=ReputationSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    spam: SpamSettings = Field(default_factory=SpamSettings)
    jobs: JobSettings = Field(default_factory=JobSettings)
    rationale: RationaleSettings = Field(default_factory=RationaleSettings)
    lexicon_dir: str | None = Field(default=None)
    log_level: str = Field(default="INFO")
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(ENV_PREFIX + name)
    return value if value not in (None, "") else fallback


def _section(merged: dict[str, Any], name: str) -> dict[str, Any]:
    value = merged.get(name)
    return value if isinstance(value, dict) else {}


def _parse_int(raw: Any, fallback: int, *, minimum: int = 1) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value >= minimum else fallback


def _parse_float(raw: Any, fallback: float, *, low: float | None = None, high: float | None = None) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    if low is not None and value < low:
        return fallback
    if high is not None and value > high:
        return fallback
    return value


def _parse_bool(raw: Any, fallback: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return fallback
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _parse_optional_str(raw: Any) -> str | None:
    value = str(raw if raw is not None else "").strip()
    return value or None


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(ENV_PREFIX + "DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(path: str | Path | None = None) -> tuple[AppConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)

    reputation = _section(merged, "reputation")
    fetch = _section(merged, "fetch")
    transport = _section(merged, "transport")
    spam = _section(merged, "spam")
    jobs = _section(merged, "jobs")
    rationale = _section(merged, "rationale")
    lexicon = _section(merged, "lexicon")
    logging_cfg = _section(merged, "logging")

    payload = {
        "reputation": {
            "api_key": _parse_optional_str(_pick_env("REPUTATION_API_KEY", reputation.get("api_key"))),
            "base_url": _parse_str(
                _pick_env("REPUTATION_BASE_URL", reputation.get("base_url")),
                "https://www.virustotal.com/api/v3",
            ).rstrip("/"),
            "poll_delay_ms": _parse_int(
                _pick_env("REPUTATION_POLL_DELAY_MS", reputation.get("poll_delay_ms", 3000)),
                3000,
                minimum=0,
            ),
            "max_attempts": _parse_int(
                _pick_env("REPUTATION_MAX_ATTEMPTS", reputation.get("max_attempts", 5)),
                5,
            ),
            "request_timeout_ms": _parse_int(
                _pick_env("REPUTATION_REQUEST_TIMEOUT_MS", reputation.get("request_timeout_ms", 15000)),
                15000,
            ),
        },
        "fetch": {
            "timeout_ms": _parse_int(_pick_env("FETCH_TIMEOUT_MS", fetch.get("timeout_ms", 10000)), 10000),
            "max_bytes": _parse_int(_pick_env("FETCH_MAX_BYTES", fetch.get("max_bytes", 2_000_000)), 2_000_000),
            "max_redirects": _parse_int(_pick_env("FETCH_MAX_REDIRECTS", fetch.get("max_redirects", 3)), 3),
            "allow_private_network": _parse_bool(
                _pick_env("FETCH_ALLOW_PRIVATE_NETWORK", fetch.get("allow_private_network", False)),
                False,
            ),
            "user_agent": _parse_str(
                _pick_env("FETCH_USER_AGENT", fetch.get("user_agent")),
                "Mozilla/5.0 (compatible; LinkguardFetcher/0.1)",
            ),
        },
        "transport": {
            "timeout_ms": _parse_int(_pick_env("TRANSPORT_TIMEOUT_MS", transport.get("timeout_ms", 5000)), 5000),
        },
        "spam": {
            "spam_threshold": _parse_float(
                _pick_env("SPAM_THRESHOLD", spam.get("spam_threshold", 0.6)), 0.6, low=0.0, high=1.0
            ),
            "high_risk_threshold": _parse_float(
                _pick_env("HIGH_RISK_THRESHOLD", spam.get("high_risk_threshold", 0.8)), 0.8, low=0.0, high=1.0
            ),
            "max_spam_keywords": _parse_int(
                _pick_env("MAX_SPAM_KEYWORDS", spam.get("max_spam_keywords", 3)), 3, minimum=0
            ),
            "max_spam_patterns": _parse_int(
                _pick_env("MAX_SPAM_PATTERNS", spam.get("max_spam_patterns", 2)), 2, minimum=0
            ),
            "high_risk_keywords": _parse_int(
                _pick_env("HIGH_RISK_KEYWORDS", spam.get("high_risk_keywords", 5)), 5, minimum=0
            ),
            "max_bulk_emails": _parse_int(_pick_env("MAX_BULK_EMAILS", spam.get("max_bulk_emails", 100)), 100),
            "max_links_per_email": _parse_int(
                _pick_env("MAX_LINKS_PER_EMAIL", spam.get("max_links_per_email", 20)), 20, minimum=0
            ),
            "link_concurrency": _parse_int(_pick_env("LINK_CONCURRENCY", spam.get("link_concurrency", 4)), 4),
        },
        "jobs": {
            "max_workers": _parse_int(_pick_env("JOB_MAX_WORKERS", jobs.get("max_workers", 8)), 8),
            "max_bulk_urls": _parse_int(_pick_env("MAX_BULK_URLS", jobs.get("max_bulk_urls", 20)), 20),
        },
        "rationale": {
            "enabled": _parse_bool(_pick_env("RATIONALE_ENABLED", rationale.get("enabled", False)), False),
            "model": _parse_str(_pick_env("RATIONALE_MODEL", rationale.get("model")), "gpt-4.1-mini"),
            "api_key": _parse_optional_str(_pick_env("RATIONALE_API_KEY", rationale.get("api_key"))),
            "base_url": _parse_optional_str(_pick_env("RATIONALE_BASE_URL", rationale.get("base_url"))),
            "timeout_s": _parse_float(
                _pick_env("RATIONALE_TIMEOUT_S", rationale.get("timeout_s", 20.0)), 20.0, low=0.1
            ),
        },
        "lexicon_dir": _parse_optional_str(_pick_env("LEXICON_DIR", lexicon.get("dir"))),
        "log_level": _parse_str(_pick_env("LOG_LEVEL", logging_cfg.get("level")), "INFO").upper(),
        "default_config_path": str(default_path),
    }

    cfg = AppConfig.model_validate(payload)
    return cfg, merged

"""Build and wire the safety service."""

from __future__ import annotations

from typing import Any

from linkguard.agents.rationale import RationaleGenerator, RationaleProvider
from linkguard.agents.service import SafetyService
from linkguard.config.settings import AppConfig, load_config
from linkguard.core.errors import ConfigError
from linkguard.domain.lexicon.loader import load_lexicon
from linkguard.domain.lexicon.models import Lexicon
from linkguard.orchestrator.jobs import JobRegistry
from linkguard.orchestrator.spam_analyzer import SpamAnalyzer, SpamPolicy
from linkguard.orchestrator.url_analyzer import TransportChecker, UrlSafetyAnalyzer
from linkguard.providers.llm_openai import OpenAIRationaleProvider, ProviderConfig
from linkguard.tools.reputation.client import ReputationClient, ReputationPolicy, ReputationProvider
from linkguard.tools.transport.tls import TransportValidator
from linkguard.tools.url_fetch.service import ContentFetcher, FetchPolicy, PageFetcher


def create_service(
    config: AppConfig | None = None,
    *,
    lexicon: Lexicon | None = None,
    reputation: ReputationProvider | None = None,
    transport: TransportChecker | None = None,
    fetcher: PageFetcher | None = None,
    rationale_provider: RationaleProvider | None = None,
) -> SafetyService:
    """Wire the analyzers from config; any collaborator can be injected instead."""

    cfg = config or load_config()[0]

    if reputation is None:
        if not cfg.reputation.api_key:
            raise ConfigError("Reputation API key is missing; set LINKGUARD_REPUTATION_API_KEY")
        reputation = ReputationClient(ReputationPolicy.from_settings(cfg.reputation))
    if lexicon is None:
        lexicon = load_lexicon(cfg.lexicon_dir)
    if transport is None:
        transport = TransportValidator(timeout_s=cfg.transport.timeout_ms / 1000.0)
    if fetcher is None:
        fetcher = ContentFetcher(FetchPolicy.from_settings(cfg.fetch))
    if rationale_provider is None and cfg.rationale.enabled:
        rationale_provider = OpenAIRationaleProvider(ProviderConfig.from_settings(cfg.rationale))

    url_analyzer = UrlSafetyAnalyzer(
        lexicon=lexicon,
        reputation=reputation,
        transport=transport,
        fetcher=fetcher,
        max_workers=cfg.jobs.max_workers,
    )
    spam_analyzer = SpamAnalyzer(
        lexicon=lexicon,
        url_analyzer=url_analyzer,
        policy=SpamPolicy.from_settings(cfg.spam),
    )
    return SafetyService(
        lexicon=lexicon,
        url_analyzer=url_analyzer,
        spam_analyzer=spam_analyzer,
        jobs=JobRegistry(url_analyzer, max_workers=cfg.jobs.max_workers),
        rationale=RationaleGenerator(rationale_provider),
        rationale_enabled=rationale_provider is not None,
        max_bulk_urls=cfg.jobs.max_bulk_urls,
        runtime=runtime_info(cfg),
    )


def runtime_info(config: AppConfig) -> dict[str, Any]:
    return {
        "reputation_base_url": config.reputation.base_url,
        "reputation_configured": bool(config.reputation.api_key),
        "rationale_enabled": config.rationale.enabled,
        "rationale_model": config.rationale.model,
        "spam_threshold": config.spam.spam_threshold,
        "high_risk_threshold": config.spam.high_risk_threshold,
        "config_path": config.default_config_path,
    }

"""Analysis orchestration: URL safety, email spam scoring and background jobs."""

from linkguard.orchestrator.fusion import SafetyWeights, WebsiteSafetyScore, score_website
from linkguard.orchestrator.jobs import JobPoll, JobRegistry, new_tracking_id
from linkguard.orchestrator.spam_analyzer import (
    SpamAnalyzer,
    SpamPolicy,
    build_spam_reason,
    compute_spam_score,
    sender_reputation,
    url_penalty,
)
from linkguard.orchestrator.url_analyzer import UrlAnalyzer, UrlSafetyAnalyzer, failed_analysis, safety_message

__all__ = [
    "JobPoll",
    "JobRegistry",
    "SafetyWeights",
    "SpamAnalyzer",
    "SpamPolicy",
    "UrlAnalyzer",
    "UrlSafetyAnalyzer",
    "WebsiteSafetyScore",
    "build_spam_reason",
    "compute_spam_score",
    "failed_analysis",
    "new_tracking_id",
    "safety_message",
    "score_website",
    "sender_reputation",
    "url_penalty",
]

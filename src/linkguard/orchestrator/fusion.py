"""Website safety score fusion.

Turns the per-dimension outcomes of a URL analysis into 0-100 sub-scores and a
weighted overall score. Reporting only: the booleans on ``UrlAnalysis`` stay
the verdict.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


@dataclass
class SafetyWeights:
    https: float = 0.30
    malware: float = 0.30
    content: float = 0.25
    reputation: float = 0.15

    def normalize(self) -> "SafetyWeights":
        total = self.https + self.malware + self.content + self.reputation
        if total <= 0:
            return SafetyWeights()
        return SafetyWeights(
            https=self.https / total,
            malware=self.malware / total,
            content=self.content / total,
            reputation=self.reputation / total,
        )


class WebsiteSafetyScore(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    https_score: int = Field(ge=0, le=100)
    malware_score: int = Field(ge=0, le=100)
    content_score: int = Field(ge=0, le=100)
    url_reputation_score: int = Field(ge=0, le=100)
    risk_level: str = "high"
    score_breakdown: dict[str, int] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


def _bounded_score(raw: Any) -> int:
    try:
        value = int(round(float(raw)))
    except (TypeError, ValueError):
        return 0
    if value < 0:
        return 0
    if value > 100:
        return 100
    return value


def score_website(
    *,
    is_secure: bool,
    reputation: dict[str, Any],
    content: dict[str, Any],
    weights: SafetyWeights | None = None,
) -> WebsiteSafetyScore:
    norm = (weights or SafetyWeights()).normalize()
    completed = reputation.get("status") == "completed"
    malicious = int(reputation.get("malicious", 0) or 0)
    suspicious = int(reputation.get("suspicious", 0) or 0)

    https_score = 100 if is_secure else 0
    malware_score = _bounded_score(100 - 50 * malicious) if completed else 0
    url_reputation_score = _bounded_score(100 - 25 * suspicious) if completed else 0

    if content.get("fetched"):
        scam_hits = len(content.get("scam_keyword_hits", []))
        pattern_hits = len(content.get("phishing_pattern_hits", []))
        legitimacy = float(content.get("legitimacy_score", 0.0) or 0.0)
        content_score = _bounded_score(90 - 30 * scam_hits - 15 * pattern_hits + 10 * legitimacy)
    else:
        content_score = 0

    overall = _bounded_score(
        https_score * norm.https
        + malware_score * norm.malware
        + content_score * norm.content
        + url_reputation_score * norm.reputation
    )
    if overall >= 80:
        level = "low"
    elif overall >= 50:
        level = "medium"
    else:
        level = "high"

    recommendations: list[str] = []
    if not is_secure:
        recommendations.append("Avoid entering credentials: the connection is not HTTPS with a valid certificate.")
    if not completed:
        recommendations.append("Reputation could not be confirmed; treat the site as untrusted until rechecked.")
    elif malicious:
        recommendations.append("Do not visit: security vendors flag this URL as malicious.")
    elif suspicious:
        recommendations.append("Proceed with caution: security vendors flag this URL as suspicious.")
    if not content.get("fetched"):
        recommendations.append("Page content could not be inspected.")
    elif content.get("scam_keyword_hits"):
        recommendations.append("Page text uses scam vocabulary; do not share personal or payment details.")

    return WebsiteSafetyScore(
        overall_score=overall,
        https_score=https_score,
        malware_score=malware_score,
        content_score=content_score,
        url_reputation_score=url_reputation_score,
        risk_level=level,
        score_breakdown={
            "https": https_score,
            "malware": malware_score,
            "content": content_score,
            "reputation": url_reputation_score,
        },
        recommendations=recommendations,
    )

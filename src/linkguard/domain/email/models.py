"""Email spam analysis contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from linkguard.domain.url.models import utc_now


class EmailSpamRequest(BaseModel):
    """One email submitted for spam analysis. Missing fields are treated as empty."""

    subject: str = ""
    content: str = ""
    sender: str = ""
    recipient: str = ""

    @field_validator("subject", "content", "sender", "recipient", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class LinkResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    is_safe: bool
    safety_message: str
    safety_score: float = Field(ge=0.0, le=1.0)


class SpamAnalysis(BaseModel):
    """Verdict for a single email. Produced once and never mutated."""

    model_config = ConfigDict(frozen=True)

    is_spam: bool
    is_high_risk: bool
    spam_score: float = Field(ge=0.0, le=1.0)
    detected_spam_keywords: list[str] = Field(default_factory=list)
    detected_patterns: list[str] = Field(default_factory=list)
    analysis_metrics: dict[str, Any] = Field(default_factory=dict)
    link_analysis_results: list[LinkResult] = Field(default_factory=list)
    spam_reason: str = ""
    rationale: str | None = None
    analyzed_at: datetime = Field(default_factory=utc_now)


class BulkSpamAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: list[SpamAnalysis] = Field(default_factory=list)
    total: int = 0
    spam_count: int = 0
    high_risk_count: int = 0
    average_score: float = 0.0
    analyzed_at: datetime = Field(default_factory=utc_now)

    @property
    def summary(self) -> str:
        if self.total == 0:
            return "No emails analyzed"
        return (
            f"Analyzed {self.total} emails: {self.spam_count} spam detected, "
            f"{self.high_risk_count} high risk, average score: {self.average_score:.2f}"
        )

"""URL analysis result models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UrlAnalysis(BaseModel):
    """Verdict for a single URL. Produced once and never mutated."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: str = "N/A"
    is_secure: bool = False
    is_safe_from_scams: bool = False
    is_text_safe: bool = False
    is_url_suspicious: bool = True
    safety_message: str = ""
    analyzed_at: datetime = Field(default_factory=utc_now)
    additional_info: dict[str, Any] = Field(default_factory=dict)
    rationale: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_suspicious(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["is_url_suspicious"] = not bool(data.get("is_safe_from_scams", False))
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_safe(self) -> bool:
        return self.is_secure and self.is_safe_from_scams and self.is_text_safe and not self.is_url_suspicious

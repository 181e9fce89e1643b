"""OpenAI chat-completions adapter for rationale text."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from linkguard.config.settings import RationaleSettings
from linkguard.core.errors import RationaleError


@dataclass(frozen=True)
class ProviderConfig:
    model: str
    api_key: str | None = None
    api_base: str | None = None
    timeout_s: float = 20.0

    @classmethod
    def from_settings(cls, settings: RationaleSettings) -> "ProviderConfig":
        return cls(
            model=settings.model,
            api_key=settings.api_key,
            api_base=settings.base_url,
            timeout_s=settings.timeout_s,
        )


class OpenAIRationaleProvider:
    def __init__(self, config: ProviderConfig, client: Any | None = None) -> None:
        self.config = config
        self._client = client

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        api_key = self.config.api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise RationaleError("missing_openai_api_key")
        from openai import OpenAI

        kwargs: dict[str, Any] = {"api_key": api_key, "timeout": self.config.timeout_s}
        base_url = self.config.api_base or os.getenv("OPENAI_BASE_URL")
        if base_url:
            kwargs["base_url"] = base_url
        self._client = OpenAI(**kwargs)
        return self._client

    def complete(self, prompt: str) -> str:
        client = self._get_client()
        response = client.chat.completions.create(
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0,
        )
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise RationaleError("empty_completion")
        return str(choices[0].message.content or "").strip()

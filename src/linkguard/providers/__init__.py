"""Model provider adapters."""

from linkguard.providers.llm_openai import OpenAIRationaleProvider, ProviderConfig

__all__ = ["OpenAIRationaleProvider", "ProviderConfig"]

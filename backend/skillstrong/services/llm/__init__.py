"""LLM provider factory."""

from skillstrong.core.config import settings
from skillstrong.services.llm.base import BaseLLMProvider, LLMError, LLMResponse, Message


def get_llm_provider(name: str | None = None) -> BaseLLMProvider:
    """Factory function that returns the configured LLM provider."""
    provider = (name or settings.llm_provider).lower()
    if provider == "openai":
        from skillstrong.services.llm.openai import OpenAIProvider
        return OpenAIProvider()
    elif provider == "gemini":
        from skillstrong.services.llm.gemini import GeminiProvider
        return GeminiProvider()
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")


__all__ = ["BaseLLMProvider", "LLMError", "LLMResponse", "Message", "get_llm_provider"]

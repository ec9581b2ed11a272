"""Abstract LLM provider interface. All providers must implement this."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class LLMError(Exception):
    """Raised when a provider is misconfigured or the upstream call fails."""


@dataclass
class Message:
    role: str  # "user" | "assistant" | "system"
    content: str


@dataclass
class LLMResponse:
    content: str


class BaseLLMProvider(ABC):
    name: str = "base"

    @abstractmethod
    async def chat(
        self,
        messages: list[Message],
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Send messages and get a single completion.

        With json_mode the provider is asked for a bare JSON object. Callers still
        validate the result; see parse_llm_json.
        """
        ...

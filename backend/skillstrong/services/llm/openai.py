"""OpenAI chat-completions provider."""

from openai import AsyncOpenAI, OpenAIError

from skillstrong.core.config import settings
from skillstrong.services.llm.base import BaseLLMProvider, LLMError, LLMResponse, Message


class OpenAIProvider(BaseLLMProvider):
    name = "openai"

    def __init__(self, model: str | None = None):
        if not settings.openai_api_key:
            raise LLMError("OpenAI API key not configured. Set SKILLSTRONG_OPENAI_API_KEY.")
        self.client = AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = model or settings.openai_model

    async def chat(
        self,
        messages: list[Message],
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        kwargs: dict = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        try:
            completion = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

        if not completion.choices:
            return LLMResponse(content="")
        return LLMResponse(content=completion.choices[0].message.content or "")

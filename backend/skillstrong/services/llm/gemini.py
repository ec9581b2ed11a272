"""Google Gemini LLM provider."""

from google import genai
from google.genai import types

from skillstrong.core.config import settings
from skillstrong.services.llm.base import BaseLLMProvider, LLMError, LLMResponse, Message


class GeminiProvider(BaseLLMProvider):
    name = "gemini"

    def __init__(self):
        if not settings.gemini_api_key:
            raise LLMError("Gemini API key not configured. Set SKILLSTRONG_GEMINI_API_KEY.")
        self.client = genai.Client(api_key=settings.gemini_api_key)
        self.model = settings.gemini_model

    async def chat(
        self,
        messages: list[Message],
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        # Gemini takes system prompts separately and calls the assistant "model"
        system = "\n\n".join(m.content for m in messages if m.role == "system")
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in messages
            if m.role != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction=system or None,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise LLMError(f"Gemini request failed: {e}") from e
        return LLMResponse(content=response.text or "")

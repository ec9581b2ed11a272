"""Conversation title generation."""

import logging

from skillstrong.services.llm import BaseLLMProvider, Message

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"


async def generate_title(llm: BaseLLMProvider, first_user: str, first_reply: str) -> str:
    prompt = (
        "Based on the following conversation, create a concise and descriptive title of "
        "5 words or less. Do not use quotation marks.\n\n"
        f'User: "{first_user[:1000]}"\n'
        f'Assistant: "{first_reply[:1000]}"\n\n'
        "Title:"
    )
    try:
        response = await llm.chat([Message(role="user", content=prompt)], temperature=0.2, max_tokens=20)
    except Exception as e:
        logger.warning(f"Title generation failed: {e}")
        return DEFAULT_TITLE

    title = (response.content or "").strip().strip('"').strip("'").strip()
    return title[:80] or DEFAULT_TITLE

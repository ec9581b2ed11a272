"""Follow-up question chips."""

import logging

from pydantic import BaseModel

from skillstrong.services.llm import BaseLLMProvider, Message
from skillstrong.services.llm.parsing import Unparseable, parse_llm_json

logger = logging.getLogger(__name__)

MAX_FOLLOWUPS = 6
MAX_WORDS = 12

DEFAULT_FOLLOWUPS = [
    "Find local apprenticeships",
    "Explore training programs",
    "Compare typical salaries (BLS)",
]

FOLLOWUP_PROMPT = f"""You suggest what a student exploring manufacturing careers might ask next.
Return a JSON object: {{"followups": ["...", "..."]}}
- Up to {MAX_FOLLOWUPS} distinct questions, each under {MAX_WORDS} words.
- Make them specific to the conversation (roles, training, pay, local options).
- No numbering, no quotes inside the strings."""


class FollowupPayload(BaseModel):
    followups: list[str]


def default_followups() -> list[str]:
    return list(DEFAULT_FOLLOWUPS)


def clean_followups(items: list[str]) -> list[str]:
    seen: set[str] = set()
    cleaned = []
    for item in items:
        text = item.strip()
        key = text.lower()
        if not text or key in seen or len(text.split()) >= MAX_WORDS:
            continue
        seen.add(key)
        cleaned.append(text)
    return cleaned[:MAX_FOLLOWUPS]


async def generate_followups(
    llm: BaseLLMProvider, query: str, answer: str, location: str | None = None
) -> list[str]:
    """Ask for next-question chips; any failure or malformed output gives the static list."""
    context = f"User question: {query}\n"
    if location:
        context += f"User location: {location}\n"
    context += f"\nAnswer given:\n{answer[:4000]}"

    try:
        response = await llm.chat(
            [Message(role="system", content=FOLLOWUP_PROMPT), Message(role="user", content=context)],
            temperature=0.4,
            json_mode=True,
        )
    except Exception as e:
        logger.warning(f"Follow-up generation failed: {e}")
        return default_followups()

    parsed = parse_llm_json(response.content, FollowupPayload)
    if isinstance(parsed, Unparseable):
        logger.debug(f"Unparseable follow-ups ({parsed.reason}): {parsed.raw[:200]!r}")
        return default_followups()

    followups = clean_followups(parsed.followups)
    return followups or default_followups()

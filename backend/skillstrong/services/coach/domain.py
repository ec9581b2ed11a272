"""In/out-of-scope gate restricting the coach to manufacturing-career topics."""

import logging

from skillstrong.services.coach.heuristics import is_manufacturing_query
from skillstrong.services.llm import BaseLLMProvider, Message

logger = logging.getLogger(__name__)

CLASSIFIER_PROMPT = """You are a strict topic classifier for a manufacturing career coach.
Decide whether the user's message is about manufacturing or skilled-trade careers: roles,
training, certifications, apprenticeships, pay, employers, or job searching in manufacturing,
or a reasonable follow-up to such a conversation.
Answer with exactly one word: IN or OUT."""

REDIRECT_MESSAGE = (
    "I focus on modern manufacturing careers. We can explore roles like CNC Machinist, "
    "Robotics Technician, Welding Programmer, Additive Manufacturing, Maintenance Tech, "
    "or Quality Control."
)


async def is_in_domain(llm: BaseLLMProvider, text: str) -> bool:
    """Keyword short-circuit, then a single zero-temperature IN/OUT call. Errors count as OUT."""
    if is_manufacturing_query(text):
        return True

    try:
        response = await llm.chat(
            [Message(role="system", content=CLASSIFIER_PROMPT), Message(role="user", content=text)],
            temperature=0,
            max_tokens=3,
        )
    except Exception as e:
        logger.warning(f"Domain classification failed, treating as out of scope: {e}")
        return False

    verdict = (response.content or "").strip().upper()
    logger.debug(f"Domain classifier verdict for {text[:80]!r}: {verdict!r}")
    return verdict.startswith("IN")

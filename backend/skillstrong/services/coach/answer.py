"""Draft answer generation with the coach persona."""

import logging

from skillstrong.services.coach.heuristics import overview_topic
from skillstrong.services.llm import BaseLLMProvider, Message

logger = logging.getLogger(__name__)

ANSWER_TEMPERATURE = 0.3

COACH_SYSTEM = """You are "Coach Mach," SkillStrong's friendly, practical guide to modern manufacturing careers in the U.S.
Answer in Markdown that is easy to scan: short sections, **bold** labels, bulleted lists.

RULES:
1. Prioritize internal data. When a system message lists SkillStrong jobs or programs, lead with those listings before general advice.
2. Vocational filter. Treat broad questions ("engineering jobs", "careers in robotics") as questions about entry-level technician, operator and skilled-trade roles reachable through certificates, apprenticeships or associate degrees, not four-year engineering paths.
3. Answer the direct question first, then add related context only if it helps.
4. Stay on topic. Only discuss manufacturing and skilled-trade careers, training, pay and job searching; politely steer anything else back.
5. Never fabricate URLs, statistics, employers or program names. If you are unsure, say so and suggest where to check (BLS, O*NET, CareerOneStop)."""

OVERVIEW_SECTIONS = ["Duties", "Training", "Career Outlook", "Common Employers", "Salary"]


def overview_prompt(topic: str) -> str:
    sections = "\n".join(f"- **{name}:** ..." for name in OVERVIEW_SECTIONS)
    return (
        f"Give me an overview of the {topic} career for someone considering entry-level manufacturing work.\n"
        f"Use a `### {topic}` heading followed by exactly these five labeled bullet sections:\n"
        f"{sections}\n"
        "Keep each section to one or two short sentences."
    )


def seed_overview(messages: list[Message]) -> list[Message]:
    """Rewrite a first-turn 'Tell me about X' into the structured overview request."""
    user_turns = [m for m in messages if m.role == "user"]
    if len(user_turns) != 1:
        return messages
    topic = overview_topic(user_turns[0].content)
    if not topic:
        return messages
    return [
        Message(role=m.role, content=overview_prompt(topic)) if m is user_turns[0] else m
        for m in messages
    ]


def build_answer_messages(
    history: list[Message],
    internal_context: str = "",
    location: str | None = None,
) -> list[Message]:
    messages = [Message(role="system", content=COACH_SYSTEM)]
    if location:
        messages.append(Message(role="system", content=f"User location: {location}"))
    if internal_context:
        messages.append(Message(
            role="system",
            content=f"Internal SkillStrong listings relevant to this question:\n\n{internal_context}",
        ))
    messages.extend(m for m in history if m.role in ("user", "assistant"))
    return messages


async def generate_answer(
    llm: BaseLLMProvider,
    history: list[Message],
    internal_context: str = "",
    location: str | None = None,
) -> str:
    """One completion at a fixed temperature. An empty completion yields an empty answer."""
    response = await llm.chat(
        build_answer_messages(history, internal_context, location),
        temperature=ANSWER_TEMPERATURE,
    )
    answer = (response.content or "").strip()
    if not answer:
        logger.warning("Answer generation returned an empty completion")
    return answer

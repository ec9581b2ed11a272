"""Chat coach endpoint and conversation title generation."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from skillstrong.api.deps import get_fetcher, get_llm, get_search, get_store
from skillstrong.core.auth import get_optional_user_id
from skillstrong.core.database import get_session
from skillstrong.models.profile import UserProfile
from skillstrong.services.coach.orchestrator import Orchestrator, fallback_result
from skillstrong.services.coach.titles import DEFAULT_TITLE, generate_title
from skillstrong.services.integrations.search import SearchService
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.listings import ListingsStore
from skillstrong.services.llm import BaseLLMProvider, LLMError, Message

router = APIRouter()
logger = logging.getLogger(__name__)


class ChatMessageIn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessageIn] = Field(min_length=1)
    location: str | None = None


class TitleRequest(BaseModel):
    messages: list[ChatMessageIn] = []


def _saved_location(session: Session, user_id: str | None) -> str | None:
    if not user_id:
        return None
    profile = session.get(UserProfile, user_id)
    return profile.zip_code if profile and profile.zip_code else None


@router.post("")
async def chat(
    body: ChatRequest,
    session: Session = Depends(get_session),
    store: ListingsStore = Depends(get_store),
    llm: BaseLLMProvider | None = Depends(get_llm),
    search: SearchService = Depends(get_search),
    fetcher: PageFetcher = Depends(get_fetcher),
    user_id: str | None = Depends(get_optional_user_id),
):
    if not any(m.role == "user" and m.content.strip() for m in body.messages):
        raise HTTPException(status_code=400, detail="At least one user message is required")

    messages = [Message(role=m.role, content=m.content) for m in body.messages]

    # Pipeline failures become a 200 apology, never a 5xx
    try:
        if llm is None:
            raise LLMError("No LLM provider configured")
        location = (body.location or "").strip() or _saved_location(session, user_id)
        orchestrator = Orchestrator(llm=llm, store=store, search=search, fetcher=fetcher)
        result = await orchestrator.run(messages, location=location)
    except Exception:
        logger.exception("Chat pipeline failed")
        result = fallback_result()

    return result.to_dict()


@router.post("/title")
async def conversation_title(body: TitleRequest, llm: BaseLLMProvider | None = Depends(get_llm)):
    if len(body.messages) < 2:
        raise HTTPException(status_code=400, detail="Not enough messages to generate a title.")
    if llm is None:
        return {"title": DEFAULT_TITLE}
    title = await generate_title(llm, body.messages[0].content, body.messages[1].content)
    return {"title": title}

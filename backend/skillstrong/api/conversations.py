"""REST API for per-user conversation history. Every query is scoped to the caller."""

import logging
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from skillstrong.core.auth import get_current_user_id
from skillstrong.core.database import get_session
from skillstrong.models.conversation import ChatMessage, Conversation

router = APIRouter()
logger = logging.getLogger(__name__)


class MessageIn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ConversationCreate(BaseModel):
    messages: list[MessageIn] = []
    title: str | None = None
    provider: str | None = None


class ConversationUpdate(BaseModel):
    messages: list[MessageIn]
    title: str | None = None
    provider: str | None = None


def _summary(c: Conversation) -> dict:
    return {
        "id": c.id,
        "title": c.title,
        "provider": c.provider,
        "created_at": c.created_at.isoformat(),
        "updated_at": c.updated_at.isoformat(),
    }


def _get_owned(session: Session, conversation_id: int, user_id: str) -> Conversation:
    conv = session.exec(
        select(Conversation).where(Conversation.id == conversation_id, Conversation.user_id == user_id)
    ).first()
    if not conv:
        logger.debug(f"Conversation {conversation_id} not found for user {user_id}")
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conv


def _delete_messages(session: Session, conversation_id: int) -> None:
    messages = session.exec(
        select(ChatMessage).where(ChatMessage.conversation_id == conversation_id)
    ).all()
    for msg in messages:
        session.delete(msg)


def _replace_messages(session: Session, conversation_id: int, messages: list[MessageIn]) -> None:
    _delete_messages(session, conversation_id)
    for position, m in enumerate(messages):
        session.add(ChatMessage(
            conversation_id=conversation_id, position=position, role=m.role, content=m.content
        ))


def _unique_title(session: Session, user_id: str, title: str) -> str:
    """Suffix ' (2)', ' (3)', ... when the caller already has a conversation with this title."""
    existing = set(session.exec(
        select(Conversation.title).where(
            Conversation.user_id == user_id, Conversation.title.startswith(title)  # type: ignore
        )
    ).all())
    if title not in existing:
        return title
    counter = 2
    while f"{title} ({counter})" in existing:
        counter += 1
    return f"{title} ({counter})"


@router.get("/")
async def list_conversations(
    user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)
):
    conversations = session.exec(
        select(Conversation)
        .where(Conversation.user_id == user_id)
        .order_by(Conversation.updated_at.desc())  # type: ignore
    ).all()
    return [_summary(c) for c in conversations]


@router.get("/{conversation_id}")
async def get_conversation(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    conv = _get_owned(session, conversation_id, user_id)
    messages = session.exec(
        select(ChatMessage)
        .where(ChatMessage.conversation_id == conversation_id)
        .order_by(ChatMessage.position, ChatMessage.id)  # type: ignore
    ).all()

    return {
        **_summary(conv),
        "messages": [{"role": m.role, "content": m.content} for m in messages],
    }


@router.post("/")
async def create_conversation(
    body: ConversationCreate,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    title = _unique_title(session, user_id, (body.title or "").strip() or "New Conversation")
    conv = Conversation(user_id=user_id, title=title, provider=body.provider)
    session.add(conv)
    session.commit()
    session.refresh(conv)

    _replace_messages(session, conv.id, body.messages)  # type: ignore[arg-type]
    session.commit()
    session.refresh(conv)
    logger.debug(f"Created conversation {conv.id} for user {user_id}")
    return _summary(conv)


@router.put("/{conversation_id}")
async def update_conversation(
    conversation_id: int,
    body: ConversationUpdate,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    conv = _get_owned(session, conversation_id, user_id)
    _replace_messages(session, conversation_id, body.messages)
    if body.title:
        conv.title = body.title
    if body.provider:
        conv.provider = body.provider
    conv.updated_at = datetime.now(timezone.utc)
    session.add(conv)
    session.commit()
    session.refresh(conv)
    return _summary(conv)


@router.delete("/{conversation_id}")
async def delete_conversation(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    conv = _get_owned(session, conversation_id, user_id)
    _delete_messages(session, conversation_id)
    session.delete(conv)
    session.commit()
    logger.debug(f"Deleted conversation {conversation_id}")
    return {"status": "deleted"}


@router.post("/clear")
async def clear_conversations(
    user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)
):
    conversations = session.exec(select(Conversation).where(Conversation.user_id == user_id)).all()
    for conv in conversations:
        _delete_messages(session, conv.id)  # type: ignore[arg-type]
        session.delete(conv)
    session.commit()
    logger.info(f"Cleared {len(conversations)} conversation(s) for user {user_id}")
    return {"status": "cleared", "deleted": len(conversations)}

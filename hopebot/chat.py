# hopebot/chat.py - message, conversation and distress endpoints
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hopebot.core.security import require_user_id
from hopebot.core.timezone import utcnow
from hopebot.db.session import get_db
from hopebot.models.message import Message
from hopebot.schemas.chat import ConversationOut, DistressOut, MessageIn, MessageOut, SendResult
from hopebot.services.conversations import group_messages_by_date
from hopebot.services.llm_client import classify_distress
from hopebot.services.responder import generate_response

logger = logging.getLogger(__name__)
router = APIRouter()


def get_user_messages(db: Session, user_id: int) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.user_id == user_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def save_message(db: Session, user_id: int, content: str, from_bot: bool) -> Message:
    message = Message(
        user_id=user_id,
        content=content,
        is_bot="true" if from_bot else "false",
        created_at=utcnow(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def _require_content(payload: MessageIn) -> str:
    content = payload.content
    if not content or not content.strip():
        raise HTTPException(status_code=400, detail="Message content is required")
    return content


# ================= Chat history =================

@router.get("/messages", response_model=List[MessageOut])
def list_messages(
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    return get_user_messages(db, user_id)


@router.get("/conversations", response_model=List[ConversationOut])
def list_conversations(
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    """Chat history grouped by calendar date, most recent first."""
    try:
        messages = get_user_messages(db, user_id)
        return group_messages_by_date(messages)
    except Exception as e:
        logger.error("Error fetching conversations: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch conversation history")


# ================= Core chat endpoint =================

@router.post("/messages", response_model=SendResult)
def send_message(
    payload: MessageIn,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    """Store the user turn, generate a reply and store the bot turn."""
    content = _require_content(payload)

    try:
        save_message(db, user_id, content, from_bot=False)
        reply = generate_response(content)
        bot_message = save_message(db, user_id, reply, from_bot=True)
    except Exception as e:
        db.rollback()
        logger.error("Message error for user %s: %s", user_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process message")

    logger.info("✅ Chat turn saved: user=%s, bot_message=%s", user_id, bot_message.id)
    return SendResult(
        message="Message sent successfully",
        response=MessageOut.model_validate(bot_message),
    )


@router.post("/messages/assess", response_model=DistressOut)
def assess_message(
    payload: MessageIn,
    user_id: int = Depends(require_user_id),
):
    """Distress triage for a piece of text; never fails on model errors."""
    content = _require_content(payload)
    assessment = classify_distress(content)
    if assessment.level == "high":
        logger.warning("High distress level detected for user %s (confidence %.2f)", user_id, assessment.confidence)
    return DistressOut(level=assessment.level, confidence=assessment.confidence)

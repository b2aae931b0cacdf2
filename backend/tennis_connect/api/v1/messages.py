import logging
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_current_user, get_db, get_optional_user
from tennis_connect.api.validators import normalize_email, strip_required
from tennis_connect.models.message import Message
from tennis_connect.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


class MessageSendIn(BaseModel):
    recipient_id: int
    recipient_type: Literal["coach", "player"] | None = None
    subject: str | None = Field(default=None, max_length=200)
    content: str = Field(min_length=1)


class ContactRequestIn(MessageSendIn):
    sender_name: str = Field(min_length=1, max_length=128)
    sender_email: str = Field(min_length=3, max_length=320)
    sender_phone: str | None = Field(default=None, max_length=32)

    @field_validator("sender_name")
    @classmethod
    def validate_sender_name(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("sender_email")
    @classmethod
    def validate_sender_email(cls, v: str) -> str:
        return normalize_email(v)


class MessageOut(BaseModel):
    id: int
    recipient_id: int
    recipient_type: str
    sender_user_id: int | None
    sender_name: str
    sender_email: str
    sender_phone: str | None
    subject: str | None
    content: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UnreadCountOut(BaseModel):
    count: int


def _resolve_recipient(db: Session, payload: MessageSendIn) -> User:
    recipient = db.execute(select(User).where(User.id == payload.recipient_id)).scalars().one_or_none()
    if not recipient:
        raise HTTPException(status_code=404, detail="Recipient not found")
    if payload.recipient_type and payload.recipient_type != recipient.role:
        raise HTTPException(status_code=400, detail="recipient_type does not match recipient")
    return recipient


def _clean_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message is required")
    return content


def _get_received_message(db: Session, message_id: int, me: User) -> Message:
    msg = db.execute(select(Message).where(Message.id == message_id)).scalars().one_or_none()
    if not msg:
        raise HTTPException(status_code=404, detail="Message not found")
    if msg.recipient_id != me.id:
        logger.warning("User %s denied access to message %s", me.id, message_id)
        raise HTTPException(status_code=403, detail="Not allowed")
    return msg


@router.get("/messages", response_model=list[MessageOut])
def list_messages(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return db.execute(
        select(Message)
        .where(Message.recipient_id == me.id)
        .order_by(Message.created_at.desc(), Message.id.desc())
    ).scalars().all()


@router.get("/messages/unread-count", response_model=UnreadCountOut)
def unread_count(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    count = db.execute(
        select(func.count(Message.id)).where(Message.recipient_id == me.id, Message.is_read.is_(False))
    ).scalar_one()
    return UnreadCountOut(count=int(count or 0))


@router.post("/messages", response_model=MessageOut, status_code=201)
def send_message(
    payload: MessageSendIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    recipient = _resolve_recipient(db, payload)
    if recipient.id == me.id:
        raise HTTPException(status_code=400, detail="Cannot message yourself")

    # Sender identity always comes from the session.
    msg = Message(
        recipient_id=recipient.id,
        recipient_type=recipient.role,
        sender_user_id=me.id,
        sender_name=me.name,
        sender_email=me.email,
        subject=payload.subject,
        content=_clean_content(payload.content),
    )
    db.add(msg)
    db.commit()
    db.refresh(msg)
    return msg


@router.post("/messages/contact", response_model=MessageOut, status_code=201)
def send_contact_request(
    payload: ContactRequestIn,
    db: Session = Depends(get_db),
    me: User | None = Depends(get_optional_user),
):
    recipient = _resolve_recipient(db, payload)

    msg = Message(
        recipient_id=recipient.id,
        recipient_type=recipient.role,
        sender_user_id=me.id if me else None,
        sender_name=payload.sender_name,
        sender_email=payload.sender_email,
        sender_phone=(payload.sender_phone or "").strip() or None,
        subject=payload.subject,
        content=_clean_content(payload.content),
    )
    db.add(msg)
    db.commit()
    db.refresh(msg)
    logger.info("Contact request %s sent to user %s", msg.id, recipient.id)
    return msg


@router.put("/messages/{message_id}/read", response_model=MessageOut)
def mark_read(
    message_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    msg = _get_received_message(db, message_id, me)
    msg.is_read = True
    db.commit()
    db.refresh(msg)
    return msg


@router.delete("/messages/{message_id}")
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    msg = _get_received_message(db, message_id, me)
    db.delete(msg)
    db.commit()
    return {"ok": True}

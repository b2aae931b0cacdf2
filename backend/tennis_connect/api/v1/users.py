import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_current_user, get_db
from tennis_connect.api.validators import strip_required
from tennis_connect.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


class UserPublicOut(BaseModel):
    id: int
    slug: str
    name: str
    role: str
    avatar: str | None
    cover: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class UserMeOut(UserPublicOut):
    email: str


class UserUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    avatar: str | None = None
    cover: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return strip_required(v)


@router.put("/users/{user_id}", response_model=UserMeOut)
def update_user(
    user_id: int,
    payload: UserUpdateIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    if user_id != me.id:
        logger.warning("User %s tried to update user %s", me.id, user_id)
        raise HTTPException(status_code=403, detail="Not allowed")

    if payload.name is not None:
        me.name = payload.name

    # Empty string clears a photo.
    if payload.avatar is not None:
        me.avatar = payload.avatar.strip() or None
    if payload.cover is not None:
        me.cover = payload.cover.strip() or None

    db.commit()
    db.refresh(me)
    return me

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_current_user, get_db, require_role
from tennis_connect.api.validators import strip_required
from tennis_connect.api.v1.users import UserMeOut
from tennis_connect.models.coach_profile import CoachProfile
from tennis_connect.models.player_profile import PlayerProfile
from tennis_connect.models.user import User

router = APIRouter()

# Photo fields live on the user row, not on the profile.
_USER_PHOTO_FIELDS = ("avatar", "cover")


class PlayerProfileOut(BaseModel):
    id: int
    user_id: int
    location: str
    age: str | None
    country: str | None
    skill_level: str
    bio: str | None
    preferred_courts: list[str]
    created_at: datetime

    class Config:
        from_attributes = True


class CoachProfileOut(BaseModel):
    id: int
    user_id: int
    title: str
    location: str
    locations: list[str]
    bio: str | None
    rating: str | None
    reviews: int
    rate: str | None
    experience: str | None
    tags: list[str]
    photos: list[str]
    schedule: Any = None
    phone: str | None
    email: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class PlayerProfileUpdateIn(BaseModel):
    location: str | None = Field(default=None, min_length=1, max_length=128)
    age: str | None = None
    country: str | None = None
    skill_level: str | None = Field(default=None, min_length=1, max_length=32)
    bio: str | None = None
    preferred_courts: list[str] | None = None
    avatar: str | None = None
    cover: str | None = None

    @field_validator("location", "skill_level")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        return strip_required(v)


class CoachProfileUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=128)
    location: str | None = Field(default=None, min_length=1, max_length=128)
    locations: list[str] | None = None
    bio: str | None = None
    rating: str | None = None
    reviews: int | None = Field(default=None, ge=0)
    rate: str | None = None
    experience: str | None = None
    tags: list[str] | None = None
    photos: list[str] | None = None
    schedule: Any = None
    phone: str | None = None
    email: str | None = None
    avatar: str | None = None
    cover: str | None = None

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        return strip_required(v)


def ensure_player_profile(db: Session, user: User) -> PlayerProfile:
    profile = db.execute(
        select(PlayerProfile).where(PlayerProfile.user_id == user.id)
    ).scalars().one_or_none()
    if profile:
        return profile

    profile = PlayerProfile(user_id=user.id, location="Sydney", skill_level="Beginner", preferred_courts=[])
    db.add(profile)
    db.flush()
    return profile


def ensure_coach_profile(db: Session, user: User) -> CoachProfile:
    profile = db.execute(
        select(CoachProfile).where(CoachProfile.user_id == user.id)
    ).scalars().one_or_none()
    if profile:
        return profile

    profile = CoachProfile(
        user_id=user.id,
        title="Coach",
        location="Sydney",
        locations=[],
        tags=[],
        photos=[],
        reviews=0,
    )
    db.add(profile)
    db.flush()
    return profile


def _apply_profile_update(user: User, profile, changes: dict[str, Any], required: tuple[str, ...]) -> None:
    for field, value in changes.items():
        if field in _USER_PHOTO_FIELDS:
            setattr(user, field, (value or "").strip() or None)
            continue
        if value is None and field in required:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        # JSON list columns are non-nullable.
        if value is None and isinstance(getattr(profile, field), list):
            value = []
        setattr(profile, field, value)


@router.get("/me", response_model=UserMeOut)
def read_me(me: User = Depends(get_current_user)):
    return me


@router.get("/me/player-profile", response_model=PlayerProfileOut | None)
def read_my_player_profile(
    db: Session = Depends(get_db),
    me: User = Depends(require_role("player")),
):
    return db.execute(
        select(PlayerProfile).where(PlayerProfile.user_id == me.id)
    ).scalars().one_or_none()


@router.put("/me/player-profile", response_model=PlayerProfileOut)
def save_my_player_profile(
    payload: PlayerProfileUpdateIn,
    db: Session = Depends(get_db),
    me: User = Depends(require_role("player")),
):
    profile = ensure_player_profile(db, me)
    _apply_profile_update(
        me, profile, payload.model_dump(exclude_unset=True), required=("location", "skill_level")
    )
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/me/coach-profile", response_model=CoachProfileOut | None)
def read_my_coach_profile(
    db: Session = Depends(get_db),
    me: User = Depends(require_role("coach")),
):
    return db.execute(
        select(CoachProfile).where(CoachProfile.user_id == me.id)
    ).scalars().one_or_none()


@router.put("/me/coach-profile", response_model=CoachProfileOut)
def save_my_coach_profile(
    payload: CoachProfileUpdateIn,
    db: Session = Depends(get_db),
    me: User = Depends(require_role("coach")),
):
    profile = ensure_coach_profile(db, me)
    changes = payload.model_dump(exclude_unset=True)
    if "reviews" in changes and changes["reviews"] is None:
        changes["reviews"] = 0
    _apply_profile_update(me, profile, changes, required=("title", "location"))
    db.commit()
    db.refresh(profile)
    return profile

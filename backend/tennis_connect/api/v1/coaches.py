from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_db
from tennis_connect.api.v1.me import CoachProfileOut
from tennis_connect.api.v1.users import UserPublicOut
from tennis_connect.models.coach_profile import CoachProfile
from tennis_connect.models.user import User

router = APIRouter()


class CoachOut(BaseModel):
    user: UserPublicOut
    profile: CoachProfileOut | None


def _coach_out(user: User, profile: CoachProfile | None) -> CoachOut:
    return CoachOut(
        user=UserPublicOut.model_validate(user),
        profile=CoachProfileOut.model_validate(profile) if profile else None,
    )


def _serves_location(profile: CoachProfile | None, needle: str) -> bool:
    if not profile:
        return False
    places = [profile.location, *(profile.locations or [])]
    return any(needle in (p or "").lower() for p in places)


def _has_tag(profile: CoachProfile | None, tag: str) -> bool:
    if not profile:
        return False
    return any((t or "").lower() == tag for t in profile.tags or [])


@router.get("/coaches", response_model=list[CoachOut])
def list_coaches(
    location: str | None = None,
    tag: str | None = None,
    db: Session = Depends(get_db),
):
    rows = db.execute(
        select(User, CoachProfile)
        .outerjoin(CoachProfile, CoachProfile.user_id == User.id)
        .where(User.role == "coach")
        .order_by(User.id.desc())
    ).all()

    # locations/tags are JSON lists, so these filters run in Python.
    if location and location.strip():
        needle = location.strip().lower()
        rows = [(u, p) for u, p in rows if _serves_location(p, needle)]
    if tag and tag.strip():
        needle = tag.strip().lower()
        rows = [(u, p) for u, p in rows if _has_tag(p, needle)]

    return [_coach_out(u, p) for u, p in rows]


@router.get("/coaches/{slug}", response_model=CoachOut)
def get_coach(slug: str, db: Session = Depends(get_db)):
    user = db.execute(select(User).where(User.slug == slug)).scalars().one_or_none()
    if not user or user.role != "coach":
        raise HTTPException(status_code=404, detail="Coach not found")

    profile = db.execute(
        select(CoachProfile).where(CoachProfile.user_id == user.id)
    ).scalars().one_or_none()
    return _coach_out(user, profile)

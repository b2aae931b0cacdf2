from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_db
from tennis_connect.api.v1.me import PlayerProfileOut
from tennis_connect.api.v1.users import UserPublicOut
from tennis_connect.models.player_profile import PlayerProfile
from tennis_connect.models.user import User

router = APIRouter()


class PlayerOut(BaseModel):
    user: UserPublicOut
    profile: PlayerProfileOut | None


def _player_out(user: User, profile: PlayerProfile | None) -> PlayerOut:
    return PlayerOut(
        user=UserPublicOut.model_validate(user),
        profile=PlayerProfileOut.model_validate(profile) if profile else None,
    )


@router.get("/players", response_model=list[PlayerOut])
def list_players(
    q: str | None = None,
    skill_level: str | None = None,
    location: str | None = None,
    db: Session = Depends(get_db),
):
    stmt = (
        select(User, PlayerProfile)
        .outerjoin(PlayerProfile, PlayerProfile.user_id == User.id)
        .where(User.role == "player")
    )

    if q and q.strip():
        stmt = stmt.where(User.name.ilike(f"%{q.strip()}%"))
    if skill_level and skill_level.strip():
        stmt = stmt.where(func.lower(PlayerProfile.skill_level) == skill_level.strip().lower())
    if location and location.strip():
        stmt = stmt.where(PlayerProfile.location.ilike(f"%{location.strip()}%"))

    rows = db.execute(stmt.order_by(User.id.desc())).all()
    return [_player_out(u, p) for u, p in rows]


@router.get("/players/{slug}", response_model=PlayerOut)
def get_player(slug: str, db: Session = Depends(get_db)):
    user = db.execute(select(User).where(User.slug == slug)).scalars().one_or_none()
    if not user or user.role != "player":
        raise HTTPException(status_code=404, detail="Player not found")

    profile = db.execute(
        select(PlayerProfile).where(PlayerProfile.user_id == user.id)
    ).scalars().one_or_none()
    return _player_out(user, profile)

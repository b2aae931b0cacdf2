import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_current_user, get_db
from tennis_connect.api.validators import strip_required
from tennis_connect.models.tournament import Tournament
from tennis_connect.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


class TournamentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    date: str = Field(min_length=1, max_length=64)
    result: str | None = Field(default=None, max_length=128)
    award: str | None = Field(default=None, max_length=128)
    photos: list[str] = Field(default_factory=list)

    @field_validator("name", "location", "date")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)


class TournamentPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, min_length=1, max_length=200)
    date: str | None = Field(default=None, min_length=1, max_length=64)
    result: str | None = Field(default=None, max_length=128)
    award: str | None = Field(default=None, max_length=128)
    photos: list[str] | None = None

    @field_validator("name", "location", "date")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        return strip_required(v)


class TournamentOut(BaseModel):
    id: int
    user_id: int
    name: str
    location: str
    date: str
    result: str | None
    award: str | None
    photos: list[str]
    created_at: datetime

    class Config:
        from_attributes = True


def _get_owned_tournament(db: Session, tournament_id: int, me: User) -> Tournament:
    t = db.execute(select(Tournament).where(Tournament.id == tournament_id)).scalars().one_or_none()
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    if t.user_id != me.id:
        logger.warning("User %s denied access to tournament %s", me.id, tournament_id)
        raise HTTPException(status_code=403, detail="Not allowed")
    return t


@router.get("/tournaments", response_model=list[TournamentOut])
def list_my_tournaments(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return db.execute(
        select(Tournament)
        .where(Tournament.user_id == me.id)
        .order_by(Tournament.created_at.desc(), Tournament.id.desc())
    ).scalars().all()


@router.post("/tournaments", response_model=TournamentOut, status_code=201)
def create_tournament(
    payload: TournamentCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    t = Tournament(
        user_id=me.id,
        name=payload.name,
        location=payload.location,
        date=payload.date,
        result=payload.result,
        award=payload.award,
        photos=payload.photos,
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@router.patch("/tournaments/{tournament_id}", response_model=TournamentOut)
def update_tournament(
    tournament_id: int,
    payload: TournamentPatch,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    t = _get_owned_tournament(db, tournament_id, me)

    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "location", "date"):
        if field in changes:
            if changes[field] is None:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
            setattr(t, field, changes[field])
    if "result" in changes:
        t.result = changes["result"]
    if "award" in changes:
        t.award = changes["award"]
    if "photos" in changes:
        t.photos = changes["photos"] or []

    db.commit()
    db.refresh(t)
    return t


@router.delete("/tournaments/{tournament_id}")
def delete_tournament(
    tournament_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    t = _get_owned_tournament(db, tournament_id, me)
    db.delete(t)
    db.commit()
    logger.info("User %s deleted tournament %s", me.id, tournament_id)
    return {"ok": True}

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_current_user, get_db
from tennis_connect.api.validators import strip_required
from tennis_connect.models.club import Club
from tennis_connect.models.user import User

router = APIRouter()


class ClubCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    services: list[str] = Field(default_factory=list)
    price: str = Field(min_length=1, max_length=64)
    phone: str = Field(min_length=1, max_length=32)
    website: str | None = None
    image: str | None = None
    rating: str | None = None

    @field_validator("name", "location", "description", "price", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)


class ClubOut(BaseModel):
    id: int
    name: str
    location: str
    description: str
    services: list[str]
    price: str
    phone: str
    website: str | None
    image: str | None
    rating: str | None
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("/clubs", response_model=list[ClubOut])
def list_clubs(location: str | None = None, db: Session = Depends(get_db)):
    stmt = select(Club)
    if location and location.strip():
        stmt = stmt.where(Club.location.ilike(f"%{location.strip()}%"))
    return db.execute(stmt.order_by(Club.name, Club.id)).scalars().all()


@router.get("/clubs/{club_id}", response_model=ClubOut)
def get_club(club_id: int, db: Session = Depends(get_db)):
    club = db.execute(select(Club).where(Club.id == club_id)).scalars().one_or_none()
    if not club:
        raise HTTPException(status_code=404, detail="Club not found")
    return club


@router.post("/clubs", response_model=ClubOut, status_code=201)
def create_club(
    payload: ClubCreate,
    db: Session = Depends(get_db),
    _me: User = Depends(get_current_user),
):
    club = Club(**payload.model_dump())
    db.add(club)
    db.commit()
    db.refresh(club)
    return club

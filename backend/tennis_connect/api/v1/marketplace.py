import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_current_user, get_db
from tennis_connect.api.validators import strip_required
from tennis_connect.models.marketplace_item import MarketplaceItem
from tennis_connect.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


class MarketplaceItemCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    price: str = Field(min_length=1, max_length=32)
    condition: str = Field(min_length=1, max_length=32)
    location: str = Field(min_length=1, max_length=128)
    image: str | None = None
    description: str | None = None

    @field_validator("title", "price", "condition", "location")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        return strip_required(v)


class MarketplaceItemPatch(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    price: str | None = Field(default=None, min_length=1, max_length=32)
    condition: str | None = Field(default=None, min_length=1, max_length=32)
    location: str | None = Field(default=None, min_length=1, max_length=128)
    image: str | None = None
    description: str | None = None

    @field_validator("title", "price", "condition", "location")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        return strip_required(v)


class MarketplaceItemOut(BaseModel):
    id: int
    user_id: int
    title: str
    price: str
    condition: str
    image: str | None
    location: str
    description: str | None
    seller_name: str
    seller_email: str | None
    created_at: datetime

    class Config:
        from_attributes = True


_REQUIRED_FIELDS = ("title", "price", "condition", "location")


def _get_owned_item(db: Session, item_id: int, me: User) -> MarketplaceItem:
    item = db.execute(select(MarketplaceItem).where(MarketplaceItem.id == item_id)).scalars().one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    if item.user_id != me.id:
        logger.warning("User %s denied access to marketplace item %s", me.id, item_id)
        raise HTTPException(status_code=403, detail="Not allowed")
    return item


@router.get("/marketplace", response_model=list[MarketplaceItemOut])
def list_items(
    q: str | None = None,
    condition: str | None = None,
    location: str | None = None,
    db: Session = Depends(get_db),
):
    stmt = select(MarketplaceItem)

    if q and q.strip():
        needle = f"%{q.strip()}%"
        stmt = stmt.where(
            or_(MarketplaceItem.title.ilike(needle), MarketplaceItem.description.ilike(needle))
        )
    if condition and condition.strip():
        stmt = stmt.where(func.lower(MarketplaceItem.condition) == condition.strip().lower())
    if location and location.strip():
        stmt = stmt.where(MarketplaceItem.location.ilike(f"%{location.strip()}%"))

    return db.execute(
        stmt.order_by(MarketplaceItem.created_at.desc(), MarketplaceItem.id.desc())
    ).scalars().all()


@router.get("/marketplace/user", response_model=list[MarketplaceItemOut])
def list_my_items(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return db.execute(
        select(MarketplaceItem)
        .where(MarketplaceItem.user_id == me.id)
        .order_by(MarketplaceItem.created_at.desc(), MarketplaceItem.id.desc())
    ).scalars().all()


@router.get("/marketplace/{item_id}", response_model=MarketplaceItemOut)
def get_item(item_id: int, db: Session = Depends(get_db)):
    item = db.execute(select(MarketplaceItem).where(MarketplaceItem.id == item_id)).scalars().one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.post("/marketplace", response_model=MarketplaceItemOut, status_code=201)
def create_item(
    payload: MarketplaceItemCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    # Seller identity always comes from the session.
    item = MarketplaceItem(
        user_id=me.id,
        title=payload.title,
        price=payload.price,
        condition=payload.condition,
        location=payload.location,
        image=payload.image or None,
        description=payload.description,
        seller_name=me.name,
        seller_email=me.email,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/marketplace/{item_id}", response_model=MarketplaceItemOut)
def update_item(
    item_id: int,
    payload: MarketplaceItemPatch,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    item = _get_owned_item(db, item_id, me)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field in _REQUIRED_FIELDS and value is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item


@router.delete("/marketplace/{item_id}")
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    item = _get_owned_item(db, item_id, me)
    db.delete(item)
    db.commit()
    logger.info("User %s deleted marketplace item %s", me.id, item_id)
    return {"ok": True}

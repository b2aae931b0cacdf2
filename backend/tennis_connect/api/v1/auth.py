import logging
import re
import secrets
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tennis_connect.api.deps import get_db, get_optional_user, get_session_id
from tennis_connect.api.v1.users import UserMeOut
from tennis_connect.api.validators import normalize_email, strip_required
from tennis_connect.core import sessions
from tennis_connect.core.security import hash_password, sign_session_id, verify_password
from tennis_connect.core.settings import settings
from tennis_connect.models.user import User
from tennis_connect.models.user_session import UserSession

logger = logging.getLogger(__name__)

router = APIRouter()


class RegisterIn(BaseModel):
    email: str
    password: str = Field(min_length=6, max_length=256)
    name: str = Field(min_length=1, max_length=128)
    role: Literal["player", "coach"]
    avatar: str | None = None
    cover: str | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)


class LoginIn(BaseModel):
    email: str
    password: str


def generate_slug(name: str) -> str:
    base = re.sub(r"[^a-z0-9]+", "-", name.lower().strip()).strip("-") or "user"
    return f"{base}-{secrets.token_hex(2)}"


def _unique_slug(db: Session, name: str) -> str:
    while True:
        slug = generate_slug(name)
        taken = db.execute(select(User.id).where(User.slug == slug)).first()
        if not taken:
            return slug


def _set_session_cookie(response: Response, s: UserSession) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sign_session_id(s.id),
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


@router.post("/auth/register", response_model=UserMeOut, status_code=201)
def register(
    payload: RegisterIn,
    response: Response,
    db: Session = Depends(get_db),
):
    exists = db.execute(select(User.id).where(User.email == payload.email)).first()
    if exists:
        raise HTTPException(status_code=409, detail="Email already exists")

    user = User(
        email=payload.email,
        password=hash_password(payload.password),
        name=payload.name,
        role=payload.role,
        slug=_unique_slug(db, payload.name),
        avatar=payload.avatar or None,
        cover=payload.cover or None,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email already exists")

    s = sessions.create_session(db, user)
    db.commit()
    db.refresh(user)

    logger.info("Registered %s user %s (%s)", user.role, user.id, user.slug)
    _set_session_cookie(response, s)
    return user


@router.post("/auth/login", response_model=UserMeOut)
def login(
    payload: LoginIn,
    response: Response,
    db: Session = Depends(get_db),
):
    email = (payload.email or "").strip().lower()
    user = db.execute(select(User).where(User.email == email)).scalars().one_or_none()
    if not user or not verify_password(payload.password, user.password):
        logger.info("Login failed for %s", email)
        raise HTTPException(status_code=401, detail="Login failed")

    s = sessions.create_session(db, user)
    db.commit()
    db.refresh(user)

    logger.info("User %s logged in", user.id)
    _set_session_cookie(response, s)
    return user


@router.post("/auth/logout")
def logout(
    response: Response,
    db: Session = Depends(get_db),
    session_id: str | None = Depends(get_session_id),
):
    if session_id:
        sessions.destroy_session(db, session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return {"ok": True}


@router.get("/auth/me", response_model=UserMeOut)
def auth_me(user: User | None = Depends(get_optional_user)):
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user

from __future__ import annotations

from collections.abc import Callable, Generator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from tennis_connect.core import sessions
from tennis_connect.core.security import unsign_session_id
from tennis_connect.core.settings import settings
from tennis_connect.db.session import SessionLocal
from tennis_connect.models.user import User


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_id(request: Request) -> str | None:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    # A cookie with a bad signature is treated as no session at all.
    session_id = unsign_session_id(token)
    if session_id is None:
        request.state.stale_session_cookie = True
    return session_id


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    session_id: str | None = Depends(get_session_id),
) -> User | None:
    if not session_id:
        return None

    s = sessions.load_session(db, session_id)
    if s is None:
        request.state.stale_session_cookie = True
        return None
    return s.user


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_role(role: str) -> Callable[[User], User]:
    """Dependency factory restricting a route to users with ``role``."""

    def _role_dependency(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise HTTPException(status_code=403, detail="Forbidden")
        return user

    return _role_dependency

"""
Server-side login sessions with an idle timeout.

A session row is created at login and touched on every authenticated
request. A session idle for longer than ``SESSION_IDLE_TIMEOUT_SECONDS``
is deleted on its next use; stale rows left behind by clients that never
come back are purged whenever a new session is created.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.orm import Session

from tennis_connect.core.settings import settings
from tennis_connect.models.user import User
from tennis_connect.models.user_session import UserSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _idle_timeout() -> timedelta:
    return timedelta(seconds=settings.SESSION_IDLE_TIMEOUT_SECONDS)


def purge_expired_sessions(db: Session) -> int:
    cutoff = _utcnow() - _idle_timeout()
    result = db.execute(delete(UserSession).where(UserSession.last_activity_at < cutoff))
    purged = result.rowcount or 0
    if purged:
        logger.info("Purged %d idle sessions", purged)
    return purged


def create_session(db: Session, user: User) -> UserSession:
    """Open a new session for ``user``. The caller commits."""
    purge_expired_sessions(db)

    s = UserSession(id=secrets.token_urlsafe(32), user_id=user.id, last_activity_at=_utcnow())
    db.add(s)
    db.flush()
    return s


def load_session(db: Session, session_id: str) -> UserSession | None:
    """Return the live session for ``session_id`` and mark it active.

    Returns None when the session does not exist or has been idle for too
    long, in which case it is removed from the store.
    """
    s = db.get(UserSession, session_id)
    if not s:
        return None

    now = _utcnow()
    if now - _as_utc(s.last_activity_at) > _idle_timeout():
        logger.info("Session for user %s expired after idle timeout", s.user_id)
        db.delete(s)
        db.commit()
        return None

    s.last_activity_at = now
    db.commit()
    return s


def destroy_session(db: Session, session_id: str) -> None:
    db.execute(delete(UserSession).where(UserSession.id == session_id))
    db.commit()

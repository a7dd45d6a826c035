"""
Session lifecycle for cookie-based authentication.

A session is created at login with a random token and an absolute expiry
24 hours later. It stays active until it is invalidated (logout, or a new
login by the same user) or until the first lookup after it has expired, at
which point the row is deleted. There is no sliding renewal.

Only one session per user is kept, by deleting the user's older sessions at
login. Two logins racing each other can briefly leave two valid sessions.
"""
import logging
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from core.database import utcnow
from core.errors import SessionExpired, SessionNotFound
from crud import user as crud_user
from models import User, UserSession

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_id"
SESSION_TTL = timedelta(hours=24)


def new_token() -> str:
    """A random 256-bit url-safe token."""
    return secrets.token_urlsafe(32)


def create_session(db: Session, user_id: int) -> UserSession:
    token = new_token()
    session = crud_user.create_session(db, user_id=user_id, token=token, expires_at=utcnow() + SESSION_TTL)
    logger.info("[Sessions] Created session for user id=%d", user_id)
    return session


def resolve_session(db: Session, token: str) -> User:
    """
    Return the user owning `token`.

    Raises SessionNotFound when the token is unknown or its user is gone, and
    SessionExpired (after deleting the row) when the expiry instant has passed.
    """
    session = crud_user.get_session(db, token) if token else None
    if session is None:
        raise SessionNotFound()

    if utcnow() > session.expires_at:
        crud_user.delete_session(db, session.id)
        logger.info("[Sessions] Session for user id=%d expired", session.user_id)
        raise SessionExpired()

    user = crud_user.get_user(db, session.user_id)
    if user is None:
        raise SessionNotFound("User not found")
    return user


def invalidate_session(db: Session, token: str) -> None:
    """Delete the session if it exists; unknown tokens are ignored."""
    if token:
        crud_user.delete_session(db, token)


def invalidate_all_for_user(db: Session, user_id: int) -> None:
    removed = crud_user.delete_sessions_for_user(db, user_id)
    if removed:
        logger.info("[Sessions] Removed %d previous session(s) for user id=%d", removed, user_id)

# This file contains shared dependencies used across different routers.

from typing import Iterator, Optional

from fastapi import Cookie, Depends, Request
from sqlalchemy.orm import Session

from core.errors import AuthRequired, NotFound, SessionExpired
from models import User
from services import sessions
from services.sessions import SESSION_COOKIE


# Dependency function to get a database session for a request.
# The session factory is owned by the app (see main.create_app); the session
# is always closed after the request is finished.
def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_optional_user(
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the cookie to a user; a missing or dead session is anonymous."""
    if not session_id:
        return None
    try:
        return sessions.resolve_session(db, session_id)
    except (NotFound, SessionExpired):
        return None


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthRequired()
    return user

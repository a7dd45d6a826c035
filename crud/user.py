# CRUD OPS: users and sessions

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session # Import Session to enable type hinting for the database session.

import schemas # Import the schemas module to access Pydantic models.
from core.errors import Conflict
from core.security import hash_password # Import the password hashing function.
from models import User, UserSession

logger = logging.getLogger(__name__)


# Function to retrieve a user from the database by their email.
# .first() style: returns the row or None if not found.
def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email)).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.scalars(select(User).where(User.username == username)).first()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


# Function to create a new user in the database.
# It takes the Pydantic schema 'UserCreate' as input for data validation.
def create_user(db: Session, user: schemas.UserCreate) -> User:
    if get_user_by_email(db, user.email):
        raise Conflict("Email already registered")
    if get_user_by_username(db, user.username):
        raise Conflict("Username already taken")

    # The plain-text password is hashed before being stored.
    db_user = User(username=user.username, email=user.email, hashed_password=hash_password(user.password))
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        db.rollback()
        raise Conflict("Email or username already registered") from None
    db.refresh(db_user)
    logger.info("[Users] Registered user id=%d", db_user.id)
    return db_user


def create_session(db: Session, user_id: int, token: str, expires_at: datetime) -> UserSession:
    db_session = UserSession(id=token, user_id=user_id, expires_at=expires_at)
    db.add(db_session)
    db.commit()
    return db_session


def get_session(db: Session, token: str) -> Optional[UserSession]:
    return db.get(UserSession, token)


def delete_session(db: Session, token: str) -> None:
    db.execute(delete(UserSession).where(UserSession.id == token))
    db.commit()


def delete_sessions_for_user(db: Session, user_id: int) -> int:
    result = db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    db.commit()
    return result.rowcount or 0

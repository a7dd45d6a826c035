import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Form, Request, Response, status
from sqlalchemy.orm import Session

import schemas
from core.errors import AuthRequired, ValidationError
from core.security import verify_password
from crud import user as crud_user
from dependencies import get_current_user, get_db
from models import User
from services import sessions
from services.sessions import SESSION_COOKIE, SESSION_TTL

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, token: str, secure: bool) -> None:
    # Client-side lifetime matches the server-side expiry.
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        path="/",
        httponly=True,
        max_age=int(SESSION_TTL.total_seconds()),
        secure=secure,
        samesite="strict",
    )


# ============================
# Register User
# ============================
@router.post("/register", response_model=schemas.UserCreated, status_code=status.HTTP_201_CREATED)
def register_user(
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    if not username.strip() or not email.strip() or not password:
        raise ValidationError("All fields are required")
    user = schemas.parse_form(schemas.UserCreate, username=username, email=email.strip(), password=password)
    db_user = crud_user.create_user(db=db, user=user)
    return {"message": "User registered successfully", "user_id": db_user.id}


# ============================
# Login (Set Cookie)
# ============================
@router.post("/login", response_model=schemas.Message)
def login(
    request: Request,
    response: Response,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    if not email.strip() or not password:
        raise ValidationError("Email and password are required")

    user = crud_user.get_user_by_email(db, schemas.normalize_email(email))
    if not user or not verify_password(password, user.hashed_password):
        logger.info("[Auth] Failed login attempt")
        raise AuthRequired("Invalid credentials")

    # one active session per user, by convention
    sessions.invalidate_all_for_user(db, user.id)
    session = sessions.create_session(db, user.id)

    _set_session_cookie(response, session.id, request.app.state.settings.cookie_secure)
    return {"message": "Login successful"}


# ============================
# Logout (Clear Cookie)
# ============================
@router.post("/logout", response_model=schemas.Message)
def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    db: Session = Depends(get_db),
):
    if session_id:
        sessions.invalidate_session(db, session_id)
    response.delete_cookie(SESSION_COOKIE, path="/", httponly=True, samesite="strict")
    return {"message": "Logout successful"}


# ============================
# Get Current User
# ============================
@router.get("/user", response_model=schemas.User)
def read_current_user(user: User = Depends(get_current_user)):
    return user

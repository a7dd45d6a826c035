# backend/schemas.py
# Pydantic models for request validation and response serialization,
# plus the small value types shared by crud/ and routers/.
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import re
from typing import List, Optional, Union

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError,
    computed_field, field_validator, model_validator,
)

from core.errors import ValidationError

MAX_CATEGORIES = 4
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def _require_text(value: str, low: int, high: int, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{label} is required")
    if not low <= len(text) <= high:
        raise ValueError(f"{label} must be between {low} and {high} characters")
    return text


def normalize_email(value: str) -> str:
    """Canonical stored form of an address: trimmed and lowercased."""
    return (value or "").strip().lower()


def parse_form(model: type, **data):
    """Build `model` from raw form values, turning pydantic errors into a 400."""
    try:
        return model(**data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        msg = first.get("msg", "Invalid input")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        field = ".".join(str(part) for part in first.get("loc", ()) if part)
        if field and field not in msg.lower():
            msg = f"{field}: {msg}"
        raise ValidationError(msg) from None


# -------------------------
# Votes
# -------------------------
class Polarity(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"

    @classmethod
    def from_bool(cls, is_like: bool) -> "Polarity":
        return cls.LIKE if is_like else cls.DISLIKE

    @property
    def is_like(self) -> bool:
        return self is Polarity.LIKE


@dataclass(frozen=True)
class PostTarget:
    id: int


@dataclass(frozen=True)
class CommentTarget:
    id: int


VoteTarget = Union[PostTarget, CommentTarget]


# -------------------------
# Auth / User
# -------------------------
class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def _trim(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        # .test, .local and other reserved domains are accepted
        v = (v or "").strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return normalize_email(v)


class User(BaseModel):
    """Public profile; the password hash never leaves the store layer."""
    model_config = ConfigDict(from_attributes=True)
    id: int
    username: str
    email: str
    created: datetime


class Category(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str


# -------------------------
# Posts / Comments
# -------------------------
class PostCreate(BaseModel):
    title: str
    content: str
    categories: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _require_text(v, 5, 100, "Title")

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        return _require_text(v, 10, 2000, "Content")

    @field_validator("categories", mode="before")
    @classmethod
    def _split_categories(cls, v) -> List[str]:
        """Accept a comma list; blanks and repeats are dropped, order kept."""
        if v is None:
            return []
        items = v.split(",") if isinstance(v, str) else list(v)
        names: List[str] = []
        for item in items:
            name = (item or "").strip()
            if name and name not in names:
                names.append(name)
        if len(names) > MAX_CATEGORIES:
            raise ValueError(f"At most {MAX_CATEGORIES} categories can be selected")
        return names


class CommentCreate(BaseModel):
    post_id: int
    content: str

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        return _require_text(v, 2, 500, "Comment")


class VoteRequest(BaseModel):
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    is_like: bool

    @model_validator(mode="after")
    def _one_target(self) -> "VoteRequest":
        if (self.post_id is None) == (self.comment_id is None):
            raise ValueError("Exactly one of post_id or comment_id is required")
        return self

    @property
    def target(self) -> VoteTarget:
        if self.post_id is not None:
            return PostTarget(self.post_id)
        return CommentTarget(self.comment_id)

    @property
    def polarity(self) -> Polarity:
        return Polarity.from_bool(self.is_like)


class _Voted(BaseModel):
    likes: int = 0
    dislikes: int = 0
    user_vote: Optional[Polarity] = None

    @computed_field
    @property
    def user_liked(self) -> Optional[bool]:
        return None if self.user_vote is None else self.user_vote is Polarity.LIKE

    @computed_field
    @property
    def user_disliked(self) -> Optional[bool]:
        return None if self.user_vote is None else self.user_vote is Polarity.DISLIKE


class Post(_Voted):
    id: int
    title: str
    content: str
    author_id: int
    author_name: str
    created: datetime
    updated: datetime
    categories: List[str] = Field(default_factory=list)


class Comment(_Voted):
    id: int
    post_id: int
    content: str
    author_id: int
    author_name: str
    created: datetime


class PostDetail(BaseModel):
    post: Post
    comments: List[Comment] = Field(default_factory=list)


# -------------------------
# Simple responses
# -------------------------
class Message(BaseModel):
    message: str


class PostCreated(Message):
    post_id: int


class CommentCreated(Message):
    comment_id: int


class UserCreated(Message):
    user_id: int

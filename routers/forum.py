# ----------------------------------------------------------------------
# Forum API router: posts, comments, votes and categories
# ----------------------------------------------------------------------
# Reads accept anonymous callers; writes need a session cookie.
# All request bodies are form-encoded, responses are JSON.

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Query, status
from sqlalchemy.orm import Session

import schemas
from core.errors import NotFound
from crud import comment as crud_comment
from crud import like as crud_like
from crud import post as crud_post
from crud.post import PostFilter
from dependencies import get_current_user, get_db, get_optional_user
from models import User

router = APIRouter()


def _user_id(user: Optional[User]) -> Optional[int]:
    return user.id if user is not None else None


# ----------------------------------------------------------------------
# posts
# ----------------------------------------------------------------------
@router.get("/posts", response_model=List[schemas.Post])
def list_posts(
    filter: Optional[str] = Query(None),
    value: str = Query(""),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    return crud_post.list_posts(db, _user_id(user), PostFilter.parse(filter), value)


@router.post("/posts", response_model=schemas.PostCreated, status_code=status.HTTP_201_CREATED)
def create_post(
    title: str = Form(""),
    content: str = Form(""),
    categories: str = Form(""),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = schemas.parse_form(schemas.PostCreate, title=title, content=content, categories=categories)
    category_ids = crud_post.resolve_category_ids(db, data.categories)
    post = crud_post.create_post(db, data.title, data.content, user.id, category_ids)
    return {"message": "Post created successfully", "post_id": post.id}


@router.get("/post/{post_id}", response_model=schemas.PostDetail)
def get_post(
    post_id: int,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    viewer_id = _user_id(user)
    post = crud_post.get_post(db, post_id, viewer_id)
    if post is None:
        raise NotFound("Post not found")
    comments = crud_comment.list_comments(db, post_id, viewer_id)
    return {"post": post, "comments": comments}


# ----------------------------------------------------------------------
# comments & votes
# ----------------------------------------------------------------------
@router.post("/comments", response_model=schemas.CommentCreated, status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: str = Form(""),
    content: str = Form(""),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = schemas.parse_form(schemas.CommentCreate, post_id=post_id.strip() or None, content=content)
    comment = crud_comment.create_comment(db, data.post_id, data.content, user.id)
    return {"message": "Comment created successfully", "comment_id": comment.id}


@router.post("/like", response_model=schemas.Message)
def toggle_like(
    post_id: str = Form(""),
    comment_id: str = Form(""),
    is_like: str = Form(""),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vote = schemas.parse_form(
        schemas.VoteRequest,
        post_id=post_id.strip() or None,
        comment_id=comment_id.strip() or None,
        is_like=is_like.strip() or None,
    )
    crud_like.toggle_like(db, user.id, vote.target, vote.polarity)
    return {"message": "Like updated successfully"}


# ----------------------------------------------------------------------
# categories
# ----------------------------------------------------------------------
@router.get("/categories", response_model=List[schemas.Category])
def list_categories(db: Session = Depends(get_db)):
    return crud_post.list_categories(db)

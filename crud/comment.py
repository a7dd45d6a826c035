# CRUD OPS: comments

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

import schemas
from core.errors import NotFound
from crud.like import to_polarity, viewer_vote_join, vote_totals
from models import Comment, Like, Post, User

logger = logging.getLogger(__name__)


def create_comment(db: Session, post_id: int, content: str, author_id: int) -> Comment:
    if db.get(Post, post_id) is None:
        raise NotFound("Post not found")
    comment = Comment(post_id=post_id, content=content, author_id=author_id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("[Comments] User id=%d commented on post id=%d", author_id, post_id)
    return comment


def list_comments(db: Session, post_id: int, viewer_id: Optional[int] = None) -> List[schemas.Comment]:
    """Comments of a post, oldest first, with vote totals and the viewer's vote."""
    totals = vote_totals(Like.comment_id)
    mine, on_mine = viewer_vote_join(Like.comment_id, Comment.id, viewer_id)
    rows = db.execute(
        select(
            Comment,
            User.username,
            func.coalesce(totals.c.likes, 0),
            func.coalesce(totals.c.dislikes, 0),
            mine.is_like,
        )
        .join(User, Comment.author_id == User.id)
        .outerjoin(totals, totals.c.target_id == Comment.id)
        .outerjoin(mine, on_mine)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created.asc(), Comment.id.asc())
    ).all()
    return [
        schemas.Comment(
            id=comment.id,
            post_id=comment.post_id,
            content=comment.content,
            author_id=comment.author_id,
            author_name=author_name,
            created=comment.created,
            likes=likes,
            dislikes=dislikes,
            user_vote=to_polarity(is_like),
        )
        for comment, author_name, likes, dislikes, is_like in rows
    ]

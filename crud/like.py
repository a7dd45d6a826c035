# CRUD OPS: likes / dislikes on posts and comments

import logging
from typing import Optional

from sqlalchemy import and_, case, false, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from core.errors import Conflict, NotFound
from models import Comment, Like, Post
from schemas import CommentTarget, Polarity, PostTarget, VoteTarget

logger = logging.getLogger(__name__)


def _target_column(target: VoteTarget):
    if isinstance(target, PostTarget):
        return Like.post_id
    if isinstance(target, CommentTarget):
        return Like.comment_id
    raise TypeError(f"unsupported vote target {target!r}")


def vote_totals(column):
    """
    Subquery with one row per target: (target_id, likes, dislikes).
    `column` is Like.post_id or Like.comment_id.
    """
    return (
        select(
            column.label("target_id"),
            func.sum(case((Like.is_like, 1), else_=0)).label("likes"),
            func.sum(case((Like.is_like, 0), else_=1)).label("dislikes"),
        )
        .where(column.isnot(None))
        .group_by(column)
        .subquery()
    )


def viewer_vote_join(column, target_id_column, viewer_id: Optional[int]):
    """
    Aliased Like plus the ON clause selecting the viewer's own vote on each
    target. With no viewer the clause matches nothing.
    """
    mine = aliased(Like)
    own_column = getattr(mine, column.key)
    if viewer_id is None:
        onclause = and_(own_column == target_id_column, false())
    else:
        onclause = and_(own_column == target_id_column, mine.user_id == viewer_id)
    return mine, onclause


def to_polarity(is_like: Optional[bool]) -> Optional[Polarity]:
    if is_like is None:
        return None
    return Polarity.from_bool(bool(is_like))


def get_vote(db: Session, user_id: int, target: VoteTarget) -> Optional[Like]:
    column = _target_column(target)
    return db.scalars(
        select(Like).where(Like.user_id == user_id, column == target.id)
    ).first()


def toggle_like(db: Session, user_id: int, target: VoteTarget, polarity: Polarity) -> Optional[Polarity]:
    """
    Apply a vote and return the user's resulting vote on the target.

    No vote yet: one is created with `polarity`.
    Same polarity already present: the vote is retracted (returns None).
    Opposite polarity present: the existing row is flipped in place.

    The read and the write run in one transaction; the unique indexes on
    likes reject a second row if a concurrent toggle got there first.
    """
    model = Post if isinstance(target, PostTarget) else Comment
    if db.get(model, target.id) is None:
        raise NotFound(f"{model.__name__} not found")

    column = _target_column(target)
    try:
        existing = db.scalars(
            select(Like)
            .where(Like.user_id == user_id, column == target.id)
            .with_for_update()
        ).first()

        if existing is None:
            db.add(Like(user_id=user_id, is_like=polarity.is_like, **{column.key: target.id}))
            result = polarity
        elif existing.is_like == polarity.is_like:
            db.delete(existing)
            result = None
        else:
            existing.is_like = polarity.is_like
            result = polarity
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Vote changed concurrently, please retry") from None
    except Exception:
        db.rollback()
        raise

    logger.info(
        "[Votes] user id=%d %s %s id=%d -> %s",
        user_id, polarity.value, model.__name__.lower(), target.id,
        result.value if result else "retracted",
    )
    return result

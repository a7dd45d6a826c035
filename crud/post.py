# CRUD OPS: categories and posts

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

import schemas
from core.database import OTHER_CATEGORY
from core.errors import AuthRequired, ValidationError
from crud.like import to_polarity, viewer_vote_join, vote_totals
from models import Category, Like, Post, PostCategory, User

logger = logging.getLogger(__name__)


class PostFilter(str, Enum):
    NONE = ""
    CATEGORY = "category"
    CREATED = "created"  # posts written by the viewer
    LIKED = "liked"      # posts the viewer liked

    @classmethod
    def parse(cls, raw: Optional[str]) -> "PostFilter":
        """Unknown or empty filter names mean no filter."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.NONE


# -------------------------
# Categories
# -------------------------
def list_categories(db: Session) -> List[Category]:
    return list(db.scalars(select(Category).order_by(Category.name)))


def get_or_create_category(db: Session, name: str) -> Category:
    category = db.scalars(select(Category).where(Category.name == name)).first()
    if category is None:
        category = Category(name=name)
        db.add(category)
        db.flush()
        logger.info("[Posts] Created category '%s'", name)
    return category


def resolve_category_ids(db: Session, names: Sequence[str]) -> List[int]:
    """
    Map category names to ids, silently dropping unknown names. An empty
    result falls back to the "Other" category, created if missing.
    """
    ids: List[int] = []
    if names:
        by_name = {c.name: c.id for c in db.scalars(select(Category).where(Category.name.in_(names)))}
        ids = [by_name[name] for name in names if name in by_name]
    if not ids:
        ids = [get_or_create_category(db, OTHER_CATEGORY).id]
    return ids


# -------------------------
# Posts
# -------------------------
def create_post(db: Session, title: str, content: str, author_id: int, category_ids: Sequence[int]) -> Post:
    """Insert a post and its category links in one transaction."""
    category_ids = list(dict.fromkeys(category_ids))
    if not 1 <= len(category_ids) <= schemas.MAX_CATEGORIES:
        raise ValidationError(f"A post needs between 1 and {schemas.MAX_CATEGORIES} categories")

    post = Post(title=title, content=content, author_id=author_id)
    try:
        db.add(post)
        db.flush()
        for category_id in category_ids:
            db.add(PostCategory(post_id=post.id, category_id=category_id))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(post)
    logger.info("[Posts] User id=%d created post id=%d", author_id, post.id)
    return post


def _post_rows(db: Session, viewer_id: Optional[int], *criteria, joins=()):
    totals = vote_totals(Like.post_id)
    mine, on_mine = viewer_vote_join(Like.post_id, Post.id, viewer_id)

    stmt = (
        select(
            Post,
            User.username,
            func.coalesce(totals.c.likes, 0),
            func.coalesce(totals.c.dislikes, 0),
            mine.is_like,
        )
        .join(User, Post.author_id == User.id)
        .outerjoin(totals, totals.c.target_id == Post.id)
        .outerjoin(mine, on_mine)
    )
    for target, onclause in joins:
        stmt = stmt.join(target, onclause)
    stmt = stmt.where(*criteria).order_by(Post.created.desc(), Post.id.desc())
    return db.execute(stmt).all()


def _post_categories(db: Session, post_ids: Sequence[int]) -> Dict[int, List[str]]:
    names: Dict[int, List[str]] = {post_id: [] for post_id in post_ids}
    if not post_ids:
        return names
    rows = db.execute(
        select(PostCategory.post_id, Category.name)
        .join(Category, PostCategory.category_id == Category.id)
        .where(PostCategory.post_id.in_(post_ids))
        .order_by(Category.name)
    )
    for post_id, name in rows:
        names[post_id].append(name)
    return names


def _to_views(db: Session, rows) -> List[schemas.Post]:
    categories = _post_categories(db, [row[0].id for row in rows])
    return [
        schemas.Post(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
            author_name=author_name,
            created=post.created,
            updated=post.updated,
            likes=likes,
            dislikes=dislikes,
            categories=categories[post.id],
            user_vote=to_polarity(is_like),
        )
        for post, author_name, likes, dislikes, is_like in rows
    ]


def list_posts(
    db: Session,
    viewer_id: Optional[int] = None,
    post_filter: PostFilter = PostFilter.NONE,
    value: str = "",
) -> List[schemas.Post]:
    """
    Posts newest first, each with vote totals, category names and the
    viewer's own vote. CREATED and LIKED describe the viewer's own content
    and raise AuthRequired without a viewer.
    """
    criteria = []
    joins = []
    if post_filter is PostFilter.CATEGORY:
        joins = [
            (PostCategory, PostCategory.post_id == Post.id),
            (Category, PostCategory.category_id == Category.id),
        ]
        criteria.append(Category.name == value)
    elif post_filter in (PostFilter.CREATED, PostFilter.LIKED):
        if viewer_id is None:
            raise AuthRequired("Authentication required for this filter")
        if post_filter is PostFilter.CREATED:
            criteria.append(Post.author_id == viewer_id)
        else:
            liked = aliased(Like)
            joins = [(liked, liked.post_id == Post.id)]
            criteria += [liked.user_id == viewer_id, liked.is_like]

    rows = _post_rows(db, viewer_id, *criteria, joins=joins)
    logger.debug("[Posts] filter=%r value=%r viewer=%s -> %d posts", post_filter.value, value, viewer_id, len(rows))
    return _to_views(db, rows)


def get_post(db: Session, post_id: int, viewer_id: Optional[int] = None) -> Optional[schemas.Post]:
    views = _to_views(db, _post_rows(db, viewer_id, Post.id == post_id))
    return views[0] if views else None

# forum_models.py
# Tables for forum content: categories, posts, the post/category join table,
# comments and votes (likes/dislikes).

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer,
    String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from core.database import Base, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), unique=True, nullable=False)


class PostCategory(Base):
    """Join table between posts and categories."""
    __tablename__ = "post_categories"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id"), primary_key=True)


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    created = Column(DateTime, default=utcnow, index=True, nullable=False)
    updated = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", back_populates="posts")
    comments = relationship("Comment", back_populates="post", cascade="all, delete")
    likes = relationship("Like", back_populates="post", cascade="all, delete")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    created = Column(DateTime, default=utcnow, nullable=False)

    post = relationship("Post", back_populates="comments")
    author = relationship("User", back_populates="comments")
    likes = relationship("Like", back_populates="comment", cascade="all, delete")


class Like(Base):
    """
    One signed vote by a user on exactly one target (a post or a comment).
    is_like=True is a like, False a dislike.
    """
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    is_like = Column(Boolean, nullable=False)
    created = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="likes")
    post = relationship("Post", back_populates="likes")
    comment = relationship("Comment", back_populates="likes")

    # NULLs compare distinct inside the composite constraint, so the partial
    # indexes below carry the per-(user, target) uniqueness.
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", "comment_id", name="uq_likes_user_target"),
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_likes_single_target",
        ),
        Index(
            "uq_likes_user_post", "user_id", "post_id", unique=True,
            sqlite_where=post_id.isnot(None), postgresql_where=post_id.isnot(None),
        ),
        Index(
            "uq_likes_user_comment", "user_id", "comment_id", unique=True,
            sqlite_where=comment_id.isnot(None), postgresql_where=comment_id.isnot(None),
        ),
    )

# models/session.py
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base


class UserSession(Base):
    """A login session. The id is the opaque token carried in the cookie."""
    __tablename__ = "sessions"
    id = Column(String(64), primary_key=True)
    # Not unique: one session per user is kept by deleting old ones at login.
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")

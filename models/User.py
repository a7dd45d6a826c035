from sqlalchemy import Column, DateTime, Integer, String # Import Column and String types for defining database columns.
from core.database import Base, utcnow # Import the Base class from your database configuration. All SQLAlchemy models will inherit from this.
from sqlalchemy.orm import relationship


# This class defines the User model for the database.
# Users are immutable once created; there is no update path.
class User(Base):
    # __tablename__ tells SQLAlchemy the name of the table to use in the database for this model.
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    # 'unique=True' ensures no two users can have the same username or email.
    username = Column(String(64), unique=True, index=True, nullable=False)
    email = Column(String(254), unique=True, index=True, nullable=False)
    # Opaque bcrypt digest; never serialized.
    hashed_password = Column(String, nullable=False)
    created = Column(DateTime, default=utcnow, nullable=False)

    # Deleting a user removes everything it owns.
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete")
    posts = relationship("Post", back_populates="author", cascade="all, delete")
    comments = relationship("Comment", back_populates="author", cascade="all, delete")
    likes = relationship("Like", back_populates="user", cascade="all, delete")

"""
The models package contains all SQLAlchemy ORM models
for the forum backend.

By importing key classes here, they can be easily accessed
from other parts of the application.

For example:
from models import User, Post
"""

from .User import User
from .session import UserSession
from .forum_models import Category, Comment, Like, Post, PostCategory

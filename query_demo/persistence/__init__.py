"""Persistence layer -- MySQL via SQLAlchemy Core and mysql-connector."""

from .models import NewPost, Post, User
from .tables import metadata, posts, users

__all__ = [
    "NewPost",
    "Post",
    "User",
    "metadata",
    "posts",
    "users",
]

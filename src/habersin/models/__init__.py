"""SQLAlchemy models for the Habersin application."""

from .comment import Comment
from .notification import Notification
from .post import Post
from .reaction import Reaction
from .report import Report
from .user import User

__all__ = [
    "Comment",
    "Notification",
    "Post",
    "Reaction",
    "Report",
    "User",
]

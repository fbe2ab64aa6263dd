"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .moderation import router as moderation_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reactions import router as reactions_router
from .reports import router as reports_router
from .users import router as users_router

__all__ = [
    "comments_router",
    "moderation_router",
    "notifications_router",
    "posts_router",
    "reactions_router",
    "reports_router",
    "users_router",
]

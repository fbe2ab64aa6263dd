"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    moderation_router,
    notifications_router,
    posts_router,
    reactions_router,
    reports_router,
    users_router,
)

__all__ = [
    "comments_router",
    "moderation_router",
    "notifications_router",
    "posts_router",
    "reactions_router",
    "reports_router",
    "users_router",
]

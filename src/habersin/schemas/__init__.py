"""Pydantic schemas for the Habersin API."""

from .comment import CommentCreate, CommentResponse
from .moderation import ModerationDecision
from .notification import NotificationResponse
from .post import PostEdit, PostPage, PostResponse
from .reaction import ReactionCreate, ReactionState
from .report import ReportCreate, ReportResponse
from .user import SocialLinks, UserResponse

__all__ = [
    "CommentCreate",
    "CommentResponse",
    "ModerationDecision",
    "NotificationResponse",
    "PostEdit",
    "PostPage",
    "PostResponse",
    "ReactionCreate",
    "ReactionState",
    "ReportCreate",
    "ReportResponse",
    "SocialLinks",
    "UserResponse",
]

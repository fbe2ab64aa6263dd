"""Business services for Habersin."""

from .admission import AdmissionGate, AdmittedPost, PostDraft, SubmissionService
from .comments import CommentService
from .feed import FeedService
from .image_validator import ImageUpload, validate_image
from .moderation import ModerationService
from .notifications import NotificationService
from .profiles import ProfileService
from .reactions import ReactionService
from .reports import ReportService

__all__ = [
    "AdmissionGate",
    "AdmittedPost",
    "CommentService",
    "FeedService",
    "ImageUpload",
    "ModerationService",
    "NotificationService",
    "PostDraft",
    "ProfileService",
    "ReactionService",
    "ReportService",
    "SubmissionService",
    "validate_image",
]

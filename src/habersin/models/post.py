"""SQLAlchemy model for posts (articles with images) and their vocabularies."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from habersin.db.session import Base
from habersin.db.time import utcnow

POST_STATUS_PENDING = "pending"
POST_STATUS_APPROVED = "approved"
POST_STATUS_REJECTED = "rejected"
# Older rows were published directly with this status; read it as approved.
POST_STATUS_ACTIVE = "active"

VISIBLE_STATUSES = (POST_STATUS_APPROVED, POST_STATUS_ACTIVE)

CATEGORIES = (
    "Social", "Politics", "Economy", "Finance", "Business", "Labour", "Entertainment",
    "Police", "Courts", "Sports", "Science", "Religion", "Education", "Health",
    "Home", "Lifestyle", "Environment", "Law", "Garbage", "Complaint", "Lost & Found",
    "Water", "Electricity", "Internet",
)


def new_document_id() -> str:
    """Return an opaque identifier for a freshly created document."""
    return uuid4().hex


class Post(Base):
    """User-submitted article that passes through admission and moderation."""

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_status_created_at", "status", "created_at"),
        Index("ix_posts_author_id", "author_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    # Ordered public URLs; the first one is the primary image.
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # Blob handles (key, url, delete_token) backing each entry of ``images``.
    image_refs: Mapped[list[dict[str, str | None]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    author_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    consent_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=POST_STATUS_PENDING)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dislikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    search_tokens: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Audit fields, written only by a moderation transition.
    moderation_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    moderated_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    moderated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

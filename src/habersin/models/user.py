"""SQLAlchemy model for user profiles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from habersin.db.session import Base
from habersin.db.time import utcnow
from habersin.models.post import new_document_id

SOCIAL_LINK_KEYS = ("twitter", "facebook", "instagram", "linkedin")


def empty_social_links() -> dict[str, str]:
    """Return the social link mapping every new profile starts with."""
    return {key: "" for key in SOCIAL_LINK_KEYS}


class User(Base):
    """Registered user. ``is_moderator`` grants access to the moderation queue."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, unique=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_moderator: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    social_links: Mapped[dict[str, str]] = mapped_column(
        JSON, nullable=False, default=empty_social_links
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def display_name(self) -> str | None:
        """Return "First Last", or None when the profile has no name yet."""
        name = f"{self.first_name} {self.last_name}".strip()
        return name or None

"""Model for comments left on posts."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from habersin.db.session import Base
from habersin.db.time import utcnow
from habersin.models.post import new_document_id


class Comment(Base):
    """Comment on a post. Comments are never edited or deleted."""

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_post_id_created_at", "post_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    post_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    author_name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

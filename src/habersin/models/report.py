"""Model for user reports against posts."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from habersin.db.session import Base
from habersin.db.time import utcnow
from habersin.models.post import new_document_id

REPORT_STATUS_NEW = "new"
REPORT_STATUS_REVIEWED = "reviewed"

REPORT_REASONS = (
    "Inappropriate content",
    "Spam",
    "Hate speech",
    "Misinformation",
    "Copyright violation",
    "Other",
)


class Report(Base):
    """Complaint filed by a user about a post."""

    __tablename__ = "reports"
    __table_args__ = (
        # One report per reporter per post.
        UniqueConstraint("post_id", "reporter_id", name="uq_report_post_reporter"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    post_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    reporter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reporter_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    reason: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=REPORT_STATUS_NEW)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

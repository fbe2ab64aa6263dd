"""Models capturing like/dislike reactions on posts."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from habersin.db.session import Base

REACTION_LIKE = "like"
REACTION_DISLIKE = "dislike"
REACTION_TYPES = (REACTION_LIKE, REACTION_DISLIKE)

# Post counter column that tracks each reaction type.
COUNTER_FIELDS = {REACTION_LIKE: "likes", REACTION_DISLIKE: "dislikes"}


def reaction_id(post_id: str, user_id: str) -> str:
    """Return the deterministic document id for a (post, user) reaction."""
    return f"{post_id}:{user_id}"


class Reaction(Base):
    """Per-user reaction on a post; at most one per (post, user)."""

    __tablename__ = "reactions"
    __table_args__ = (
        CheckConstraint("type IN ('like', 'dislike')", name="ck_reaction_type"),
        UniqueConstraint("post_id", "user_id", name="uq_reaction_post_user"),
        Index("ix_reactions_post_id", "post_id"),
    )

    id: Mapped[str] = mapped_column(String(140), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)

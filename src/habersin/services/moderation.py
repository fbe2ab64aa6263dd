"""Moderation services for Habersin."""

from __future__ import annotations

import logging

from habersin.core.errors import AuthorizationError, InvalidTransitionError, NotFoundError
from habersin.core.settings import Settings, settings
from habersin.db.time import utcnow
from habersin.models.notification import NOTIFICATION_MODERATION
from habersin.models.post import (
    POST_STATUS_APPROVED,
    POST_STATUS_PENDING,
    POST_STATUS_REJECTED,
)
from habersin.services.retry import retry_transient
from habersin.store.base import Document, DocumentStore

logger = logging.getLogger(__name__)

DECISIONS = (POST_STATUS_APPROVED, POST_STATUS_REJECTED)

DEFAULT_NOTES = {
    POST_STATUS_APPROVED: "Content approved.",
    POST_STATUS_REJECTED: "Content rejected.",
}
APPROVED_MESSAGE = "Your post has been approved and published!"
DEFAULT_REJECTION_REASON = "Does not comply with content policies."


def notification_message(decision: str, note: str | None) -> str:
    """Text sent to the author for a moderation decision."""
    if decision == POST_STATUS_APPROVED:
        return APPROVED_MESSAGE
    return f"Your post has been rejected. Reason: {note or DEFAULT_REJECTION_REASON}"


class ModerationService:
    """Moderator-only transitions of posts from pending to approved or rejected."""

    def __init__(self, store: DocumentStore, config: Settings | None = None) -> None:
        self.store = store
        self.config = config or settings

    def require_moderator(self, user_id: str | None) -> Document:
        """Return the moderator's user document or raise AuthorizationError."""
        if not user_id:
            raise AuthorizationError("Please sign in.")
        user = self.store.get("users", user_id)
        if user is None or not user.get("is_moderator"):
            raise AuthorizationError("You are not allowed to moderate content.")
        return user

    def apply_decision(
        self,
        post_id: str,
        decision: str,
        moderator_id: str,
        note: str | None = None,
    ) -> Document:
        """Perform one moderation transition without retrying.

        Args:
            post_id: Post being moderated.
            decision: ``approved`` or ``rejected``.
            moderator_id: User making the decision; must be a moderator.
            note: Optional reason shown to the author.

        Returns:
            The updated post document.

        Raises:
            AuthorizationError: If the caller is not a moderator.
            NotFoundError: If the post does not exist.
            InvalidTransitionError: If the post is no longer pending.
        """
        if decision not in DECISIONS:
            raise InvalidTransitionError(f"Unknown decision: {decision}", code="invalid_decision")
        self.require_moderator(moderator_id)

        note = note.strip() if note else None
        with self.store.batch():
            post = self.store.get("posts", post_id)
            if post is None:
                raise NotFoundError("Post not found")
            if post["status"] != POST_STATUS_PENDING:
                raise InvalidTransitionError(
                    f"Post is already {post['status']}",
                    code="not_pending",
                )

            # Another moderator may have decided since the read above.
            transitioned = self.store.update_where(
                "posts",
                post_id,
                {"status": POST_STATUS_PENDING},
                {
                    "status": decision,
                    "moderation_note": note or DEFAULT_NOTES[decision],
                    "moderated_by": moderator_id,
                    "moderated_at": utcnow(),
                },
            )
            if not transitioned:
                raise InvalidTransitionError(
                    "Post has already been moderated",
                    code="not_pending",
                )
            self.store.create(
                "notifications",
                {
                    "user_id": post["author_id"],
                    "type": NOTIFICATION_MODERATION,
                    "message": notification_message(decision, note),
                    "post_id": post_id,
                    "read": False,
                },
            )

        logger.info("Post %s %s by moderator %s", post_id, decision, moderator_id)
        updated = self.store.get("posts", post_id)
        if updated is None:  # pragma: no cover - deleted right after moderation
            raise NotFoundError("Post not found")
        return updated

    async def moderate(
        self,
        post_id: str,
        decision: str,
        moderator_id: str,
        note: str | None = None,
    ) -> Document:
        """Moderate a pending post, retrying transient store failures."""
        return await retry_transient(
            lambda: self.apply_decision(post_id, decision, moderator_id, note),
            attempts=self.config.moderation_max_attempts,
            delay=self.config.moderation_retry_delay_seconds,
            description="Moderation",
        )

    async def pending_queue(self, moderator_id: str | None) -> list[Document]:
        """Return pending posts, newest first, for a moderator."""

        def load() -> list[Document]:
            self.require_moderator(moderator_id)
            return self.store.query(
                "posts",
                filters={"status": POST_STATUS_PENDING},
                order_by="created_at",
                descending=True,
            )

        return await retry_transient(
            load,
            attempts=self.config.moderation_max_attempts,
            delay=self.config.moderation_retry_delay_seconds,
            description="Loading pending posts",
        )

"""Notifications addressed to users."""

from __future__ import annotations

from habersin.core.errors import AuthorizationError, NotFoundError
from habersin.core.settings import Settings, settings
from habersin.db.time import utcnow
from habersin.models.notification import NOTIFICATION_SYSTEM
from habersin.store.base import Document, DocumentStore
from habersin.store.subscription import Subscription

WELCOME_MESSAGE = "Notification system initialized"


class NotificationService:
    def __init__(self, store: DocumentStore, config: Settings | None = None) -> None:
        self.store = store
        self.config = config or settings

    def ensure_initialized(self, user_id: str) -> bool:
        """Create the welcome notification for users that have none yet.

        Returns:
            True if a notification was created.
        """
        if self.store.query("notifications", filters={"user_id": user_id}, limit=1):
            return False
        self.store.create(
            "notifications",
            {
                "user_id": user_id,
                "type": NOTIFICATION_SYSTEM,
                "message": WELCOME_MESSAGE,
                "read": False,
            },
        )
        return True

    def unread(self, user_id: str) -> list[Document]:
        """Unread notifications, newest first."""
        return self.store.query(
            "notifications",
            filters={"user_id": user_id, "read": False},
            order_by="created_at",
            descending=True,
            limit=self.config.notification_limit,
        )

    def mark_read(self, notification_id: str, user_id: str) -> None:
        notification = self.store.get("notifications", notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification["user_id"] != user_id:
            raise AuthorizationError("This notification belongs to another user.")
        self.store.update("notifications", notification_id, {"read": True, "updated_at": utcnow()})

    def watch_unread(self, user_id: str) -> Subscription:
        """Live stream of the user's unread notifications."""
        return self.store.subscribe(
            "notifications",
            filters={"user_id": user_id, "read": False},
            order_by="created_at",
            descending=True,
            limit=self.config.notification_limit,
        )

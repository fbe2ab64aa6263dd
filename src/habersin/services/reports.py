"""User reports against posts."""

from __future__ import annotations

import logging

from habersin.core.errors import AuthorizationError, NotFoundError, ValidationError
from habersin.models.report import REPORT_REASONS, REPORT_STATUS_NEW, REPORT_STATUS_REVIEWED
from habersin.store.base import Document, DocumentStore

logger = logging.getLogger(__name__)


class ReportService:
    """Files reports and lets moderators mark them reviewed."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def file_report(
        self,
        post_id: str,
        reporter_id: str,
        reason: str,
        description: str = "",
        reporter_name: str | None = None,
    ) -> Document:
        """Record a report; each user may report a given post only once.

        Raises:
            ValidationError: Unknown reason or a repeated report.
            NotFoundError: The post does not exist.
        """
        if reason not in REPORT_REASONS:
            raise ValidationError("Please choose a reason for the report.", code="invalid_reason")

        post = self.store.get("posts", post_id)
        if post is None:
            raise NotFoundError("Post not found")

        previous = self.store.query(
            "reports",
            filters={"post_id": post_id, "reporter_id": reporter_id},
            limit=1,
        )
        if previous:
            raise ValidationError(
                "You have already reported this content.",
                code="already_reported",
            )

        report_id = self.store.create(
            "reports",
            {
                "post_id": post_id,
                "post_title": post["title"],
                "reporter_id": reporter_id,
                "reporter_name": reporter_name,
                "reason": reason,
                "description": description,
                "status": REPORT_STATUS_NEW,
            },
        )
        logger.info("Report %s filed on post %s (%s)", report_id, post_id, reason)
        report = self.store.get("reports", report_id)
        if report is None:  # pragma: no cover - store lost a committed write
            raise NotFoundError("Report not found")
        return report

    def list_reports(self, moderator: Document, status: str | None = None) -> list[Document]:
        """Reports for the moderation panel, newest first."""
        if not moderator.get("is_moderator"):
            raise AuthorizationError("You are not allowed to review reports.")
        filters = {"status": status} if status else None
        return self.store.query(
            "reports", filters=filters, order_by="created_at", descending=True
        )

    def mark_reviewed(self, report_id: str, moderator: Document) -> Document:
        if not moderator.get("is_moderator"):
            raise AuthorizationError("You are not allowed to review reports.")
        if not self.store.exists("reports", report_id):
            raise NotFoundError("Report not found")
        self.store.update("reports", report_id, {"status": REPORT_STATUS_REVIEWED})
        report = self.store.get("reports", report_id)
        if report is None:  # pragma: no cover - deleted concurrently
            raise NotFoundError("Report not found")
        return report

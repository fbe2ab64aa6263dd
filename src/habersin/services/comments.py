"""Comments on posts."""

from __future__ import annotations

from habersin.core.errors import NotFoundError, ValidationError
from habersin.store.base import Document, DocumentStore
from habersin.store.subscription import Subscription

ANONYMOUS_COMMENTER = "anonymous user"


class CommentService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def add_comment(
        self,
        post_id: str,
        author_id: str,
        content: str,
        author_name: str | None = None,
    ) -> Document:
        """Store a non-blank comment on an existing post."""
        if not content or not content.strip():
            raise ValidationError("Comment cannot be empty.", code="empty_comment")
        if not self.store.exists("posts", post_id):
            raise NotFoundError("Post not found")

        comment_id = self.store.create(
            "comments",
            {
                "post_id": post_id,
                "content": content,
                "author_id": author_id,
                "author_name": author_name or ANONYMOUS_COMMENTER,
            },
        )
        comment = self.store.get("comments", comment_id)
        if comment is None:  # pragma: no cover - store lost a committed write
            raise NotFoundError("Comment not found")
        return comment

    def list_comments(self, post_id: str) -> list[Document]:
        """Comments on the post, newest first."""
        return self.store.query(
            "comments",
            filters={"post_id": post_id},
            order_by="created_at",
            descending=True,
        )

    def watch_comments(self, post_id: str) -> Subscription:
        """Live stream of the post's comments, newest first."""
        return self.store.subscribe(
            "comments",
            filters={"post_id": post_id},
            order_by="created_at",
            descending=True,
        )

"""Public post listings."""

from __future__ import annotations

from habersin.core.errors import NotFoundError
from habersin.core.settings import Settings, settings
from habersin.models.post import VISIBLE_STATUSES
from habersin.store.base import Document, DocumentStore

_SEARCHED_FIELDS = ("title", "content", "category", "author_name")


def matches_search(post: Document, query: str) -> bool:
    """True when every whitespace-separated term of ``query`` appears in the post."""
    terms = query.lower().split()
    haystack = " ".join(str(post.get(name) or "") for name in _SEARCHED_FIELDS).lower()
    return all(term in haystack for term in terms)


class FeedService:
    def __init__(self, store: DocumentStore, config: Settings | None = None) -> None:
        self.store = store
        self.config = config or settings

    def list_posts(
        self,
        *,
        cursor: str | None = None,
        search: str | None = None,
        category: str | None = None,
    ) -> tuple[list[Document], str | None]:
        """Return one page of visible posts, newest first, and the next cursor.

        The cursor is the id of the last post of the previous page. A search
        only filters the page that was fetched.
        """
        filters: dict[str, object] = {"status": VISIBLE_STATUSES}
        if category:
            filters["category"] = category
        page = self.store.query(
            "posts",
            filters=filters,
            order_by="created_at",
            descending=True,
            limit=self.config.page_size,
            start_after=cursor,
        )
        next_cursor = page[-1]["id"] if len(page) == self.config.page_size else None
        if search and search.strip():
            page = [post for post in page if matches_search(post, search)]
        return page, next_cursor

    def get_post(self, post_id: str, viewer_id: str | None = None) -> Document:
        """Return a post; unpublished posts are visible only to their author."""
        post = self.store.get("posts", post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if post["status"] not in VISIBLE_STATUSES and post["author_id"] != viewer_id:
            raise NotFoundError("Post not found")
        return post

    def posts_by_author(self, author_id: str) -> list[Document]:
        """All of an author's posts regardless of status, newest first."""
        return self.store.query(
            "posts",
            filters={"author_id": author_id},
            order_by="created_at",
            descending=True,
        )

    def search(self, query: str, *, cursor: str | None = None) -> tuple[list[Document], str | None]:
        """Page of visible posts matching every term of ``query``."""
        return self.list_posts(cursor=cursor, search=query)

    def record_view(self, post_id: str) -> None:
        self.store.increment("posts", post_id, "views", 1)

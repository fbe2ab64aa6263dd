"""Collaborator interfaces for the document store and the blob store.

Services receive these as constructor arguments and never reach for a global
backend client, so tests can swap in any implementation.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

Document = dict[str, Any]


@dataclass(frozen=True)
class BlobHandle:
    """Reference to an uploaded object."""

    key: str
    url: str
    # Secret some hosts hand back for anonymous deletion.
    delete_token: str | None = None


class DocumentStore(Protocol):
    """Collection/id addressed document storage."""

    def create(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a document under a generated id and return that id."""
        ...

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Create or overwrite the document with the given id."""
        ...

    def get(self, collection: str, doc_id: str) -> Document | None:
        ...

    def exists(self, collection: str, doc_id: str) -> bool:
        ...

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Apply a partial update; raises NotFoundError for a missing document."""
        ...

    def delete(self, collection: str, doc_id: str) -> bool:
        ...

    def increment(self, collection: str, doc_id: str, field: str, delta: int) -> None:
        """Atomically add ``delta`` to a numeric field on the server side."""
        ...

    def update_where(
        self,
        collection: str,
        doc_id: str,
        expected: Mapping[str, Any],
        fields: Mapping[str, Any],
    ) -> bool:
        """Apply ``fields`` only if the stored document still matches ``expected``.

        Returns False when the document is missing or no longer matches.
        """
        ...

    def query(
        self,
        collection: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
        start_after: str | None = None,
    ) -> list[Document]:
        ...

    def subscribe(
        self,
        collection: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> Any:
        """Return a Subscription yielding snapshots of the query result."""
        ...

    def batch(self) -> AbstractContextManager[None]:
        """Group the enclosed writes into one atomic unit."""
        ...


class BlobStore(Protocol):
    """Object storage for uploaded images."""

    async def upload(self, path: str, data: bytes, content_type: str) -> BlobHandle:
        ...

    async def public_url(self, handle: BlobHandle) -> str:
        ...

    async def delete(self, handle: BlobHandle) -> None:
        ...


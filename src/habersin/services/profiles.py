"""User profile updates: social links and profile photos."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from uuid import uuid4

from habersin.core.errors import NotFoundError, StoreError, ValidationError
from habersin.core.settings import Settings, settings
from habersin.models.user import SOCIAL_LINK_KEYS
from habersin.services.image_validator import ImageUpload, validate_image
from habersin.store.base import BlobStore, Document, DocumentStore

logger = logging.getLogger(__name__)


def display_name(user: Mapping[str, object]) -> str | None:
    """Return "First Last" for a user document, or None when both are blank."""
    name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
    return name or None


class ProfileService:
    def __init__(
        self,
        store: DocumentStore,
        blobs: BlobStore,
        config: Settings | None = None,
    ) -> None:
        self.store = store
        self.blobs = blobs
        self.config = config or settings

    def get_user(self, user_id: str) -> Document:
        user = self.store.get("users", user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_social_links(self, user_id: str, links: Mapping[str, str]) -> Document:
        """Replace the user's social links; only the four known networks are accepted."""
        unknown = sorted(set(links) - set(SOCIAL_LINK_KEYS))
        if unknown:
            raise ValidationError(
                f"Unsupported social link(s): {', '.join(unknown)}",
                code="invalid_social_link",
            )
        self.get_user(user_id)
        social_links = {key: (links.get(key) or "").strip() for key in SOCIAL_LINK_KEYS}
        self.store.update("users", user_id, {"social_links": social_links})
        return self.get_user(user_id)

    async def update_photo(self, user_id: str, upload: ImageUpload) -> Document:
        """Validate and upload a new profile photo, then point the profile at it."""
        self.get_user(user_id)
        validate_image(upload, max_bytes=self.config.upload_image_max_bytes)

        handle = await self.blobs.upload(
            f"profiles/{user_id}/{uuid4().hex}", upload.data, upload.content_type
        )
        url = await self.blobs.public_url(handle)
        try:
            self.store.update("users", user_id, {"photo_url": url})
        except StoreError:
            await self.blobs.delete(handle)
            raise
        logger.info("Updated profile photo of %s", user_id)
        return self.get_user(user_id)

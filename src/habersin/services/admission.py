"""Submission admission: validation of drafts and all-or-nothing publishing.

``AdmissionGate`` decides whether a draft may enter the moderation queue.
``SubmissionService`` uploads the images of an admitted draft and only then
writes the post document, so a failed upload never leaves a partial post.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field, fields
from typing import Any
from uuid import uuid4

from habersin.core.errors import (
    AuthorizationError,
    NotFoundError,
    StoreError,
    TerminalStoreError,
    ValidationError,
)
from habersin.core.settings import Settings, settings
from habersin.db.time import utcnow
from habersin.models.post import CATEGORIES
from habersin.services.content_filter import contains_profanity
from habersin.services.image_validator import ImageUpload, validate_image
from habersin.services.profiles import display_name
from habersin.store.base import BlobHandle, BlobStore, Document, DocumentStore

logger = logging.getLogger(__name__)

POSTS = "posts"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class PostDraft:
    """Post as submitted by an author, before any validation."""

    title: str
    content: str
    category: str
    images: list[ImageUpload] = field(default_factory=list)
    consent_accepted: bool = False
    is_anonymous: bool = False


@dataclass
class AdmittedPost:
    """A draft that passed every admission rule, ready to be stored."""

    title: str
    content: str
    category: str
    author_id: str
    author_name: str
    is_anonymous: bool
    status: str
    search_tokens: list[str]
    images: list[ImageUpload]
    consent_accepted: bool = True
    likes: int = 0
    dislikes: int = 0
    views: int = 0

    def to_document(self, handles: list[BlobHandle]) -> dict[str, Any]:
        """Return post fields for the document store given the uploaded images."""
        document = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "images"}
        document["images"] = [handle.url for handle in handles]
        document["image_refs"] = [asdict(handle) for handle in handles]
        return document


def build_search_tokens(title: str, content: str, category: str) -> list[str]:
    """Lower-cased words of title, content and category longer than two characters."""
    words = [*title.lower().split(), *content.lower().split(), category.lower()]
    tokens: list[str] = []
    seen: set[str] = set()
    for word in words:
        if len(word) > 2 and word not in seen:
            seen.add(word)
            tokens.append(word)
    return tokens


def check_text_rules(title: str, content: str, config: Settings) -> None:
    """Apply profanity and minimum length rules to a title and body."""
    if contains_profanity(title):
        raise ValidationError(
            "Inappropriate language detected in the title. Please edit it.",
            code="title_profanity",
        )
    if contains_profanity(content):
        raise ValidationError(
            "Inappropriate language detected in the content. Please edit it.",
            code="content_profanity",
        )
    if len(title) < config.min_title_length:
        raise ValidationError(
            f"Title must be at least {config.min_title_length} characters.",
            code="title_too_short",
        )
    if len(content) < config.min_content_length:
        raise ValidationError(
            f"Content must be at least {config.min_content_length} characters.",
            code="content_too_short",
        )


def check_category(category: str) -> None:
    if category not in CATEGORIES:
        raise ValidationError("Please choose a valid category.", code="invalid_category")


class AdmissionGate:
    """Ordered admission rules; the first failing rule is reported."""

    def __init__(self, config: Settings | None = None) -> None:
        self.config = config or settings

    def evaluate(
        self,
        draft: PostDraft,
        *,
        author_id: str,
        author_name: str | None,
    ) -> AdmittedPost:
        """Validate ``draft`` from scratch and return the post to persist.

        Raises:
            ValidationError: With a distinct ``code`` for each failed rule.
        """
        if not draft.consent_accepted:
            raise ValidationError("Please accept the sharing terms.", code="consent_required")

        if not draft.images:
            raise ValidationError("Select at least 1 image.", code="too_few_images")
        if len(draft.images) > self.config.max_images_per_post:
            raise ValidationError(
                f"You can select at most {self.config.max_images_per_post} images.",
                code="too_many_images",
            )

        check_text_rules(draft.title, draft.content, self.config)
        check_category(draft.category)

        for upload in draft.images:
            validate_image(upload, max_bytes=self.config.submission_image_max_bytes)

        title = draft.title.upper()
        if draft.is_anonymous:
            shown_name = self.config.anonymous_author_label
        else:
            shown_name = author_name or self.config.unnamed_author_label

        return AdmittedPost(
            title=title,
            content=draft.content,
            category=draft.category,
            author_id=author_id,
            author_name=shown_name,
            is_anonymous=draft.is_anonymous,
            status=self.config.default_post_status,
            search_tokens=build_search_tokens(title, draft.content, draft.category),
            images=list(draft.images),
        )


def _blob_path(folder: str, index: int, upload: ImageUpload) -> str:
    name = _UNSAFE_FILENAME_CHARS.sub("-", upload.filename).strip("-") or "image"
    return f"{folder}/{index}-{name}"


class SubmissionService:
    """Publishes admitted drafts and applies author edits."""

    def __init__(
        self,
        store: DocumentStore,
        blobs: BlobStore,
        *,
        gate: AdmissionGate | None = None,
        config: Settings | None = None,
    ) -> None:
        self.store = store
        self.blobs = blobs
        self.config = config or settings
        self.gate = gate or AdmissionGate(self.config)

    async def _discard(self, handles: list[BlobHandle]) -> None:
        for handle in handles:
            try:
                await self.blobs.delete(handle)
            except StoreError as err:
                logger.warning("Could not remove orphaned upload %s: %s", handle.key, err)

    async def _upload_all(self, uploads: list[ImageUpload], folder: str) -> list[BlobHandle]:
        handles: list[BlobHandle] = []
        for index, upload in enumerate(uploads):
            try:
                handle = await self.blobs.upload(
                    _blob_path(folder, index, upload), upload.data, upload.content_type
                )
            except StoreError as err:
                logger.warning(
                    "Upload %d/%d failed (%s); rolling back %d uploaded image(s)",
                    index + 1,
                    len(uploads),
                    err,
                    len(handles),
                )
                await self._discard(handles)
                raise TerminalStoreError(
                    f"Image {index + 1} of {len(uploads)} could not be uploaded.",
                    code="upload_failed",
                    retryable=err.retryable,
                ) from err
            handles.append(handle)
        return handles

    async def submit(self, draft: PostDraft, author: Document) -> Document:
        """Admit ``draft`` for ``author``, upload its images and store the post."""
        author_name = display_name(author)
        admitted = self.gate.evaluate(
            draft,
            author_id=author["id"],
            author_name=author_name,
        )

        handles = await self._upload_all(admitted.images, f"posts/{uuid4().hex}")
        try:
            post_id = self.store.create(POSTS, admitted.to_document(handles))
        except StoreError:
            await self._discard(handles)
            raise

        logger.info(
            "Admitted post %s by %s with status %s", post_id, admitted.author_id, admitted.status
        )
        post = self.store.get(POSTS, post_id)
        if post is None:  # pragma: no cover - store lost a committed write
            raise TerminalStoreError("Post disappeared after creation")
        return post

    async def edit(
        self,
        post_id: str,
        editor_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        category: str | None = None,
        image: ImageUpload | None = None,
    ) -> Document:
        """Apply an author's edit; a new image replaces the primary one."""
        post = self.store.get(POSTS, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if post["author_id"] != editor_id:
            raise AuthorizationError("Only the author can edit this post")

        raw_title = title if title is not None else post["title"]
        new_content = content if content is not None else post["content"]
        new_category = category if category is not None else post["category"]
        # Checked before upper-casing: "ı".upper().lower() is "i".
        check_text_rules(raw_title, new_content, self.config)
        check_category(new_category)
        new_title = raw_title.upper()

        fields: dict[str, Any] = {
            "title": new_title,
            "content": new_content,
            "category": new_category,
            "search_tokens": build_search_tokens(new_title, new_content, new_category),
            "updated_at": utcnow(),
        }

        old_primary: BlobHandle | None = None
        new_handles: list[BlobHandle] = []
        if image is not None:
            validate_image(image, max_bytes=self.config.edit_image_max_bytes)
            new_handles = await self._upload_all([image], f"posts/{post_id}/edits/{uuid4().hex}")
            refs = list(post.get("image_refs") or [])
            images = list(post["images"])
            if refs:
                old_primary = BlobHandle(**refs[0])
            new_ref = asdict(new_handles[0])
            images[:1] = [new_handles[0].url]
            refs[:1] = [new_ref]
            fields["images"] = images
            fields["image_refs"] = refs

        try:
            self.store.update(POSTS, post_id, fields)
        except StoreError:
            await self._discard(new_handles)
            raise

        if old_primary is not None:
            await self._discard([old_primary])

        logger.info("Post %s edited by its author", post_id)
        updated = self.store.get(POSTS, post_id)
        if updated is None:  # pragma: no cover - store lost a committed write
            raise NotFoundError("Post not found")
        return updated

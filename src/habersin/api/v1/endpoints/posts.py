"""Post submission, listing and editing endpoints."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from habersin.api.v1.dependencies import (
    BlobStoreDep,
    CurrentUserDep,
    OptionalUserDep,
    StoreDep,
)
from habersin.schemas.post import PostPage, PostResponse
from habersin.services.admission import PostDraft, SubmissionService
from habersin.services.feed import FeedService
from habersin.services.image_validator import ImageUpload
from habersin.store.base import Document

router = APIRouter(prefix="/posts", tags=["posts"])


async def read_upload(upload: UploadFile) -> ImageUpload:
    """Buffer an uploaded file for validation."""
    data = await upload.read()
    return ImageUpload(
        filename=upload.filename or "image",
        content_type=upload.content_type or "",
        data=data,
    )


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def submit_post(
    store: StoreDep,
    blobs: BlobStoreDep,
    current_user: CurrentUserDep,
    title: Annotated[str, Form()],
    content: Annotated[str, Form()],
    category: Annotated[str, Form()],
    images: Annotated[list[UploadFile] | None, File(description="One to three images")] = None,
    consent_accepted: Annotated[bool, Form()] = False,
    is_anonymous: Annotated[bool, Form()] = False,
) -> Document:
    """Submit a post for moderation.

    The draft is validated, its images uploaded, and only then is the post
    stored with the configured initial status.
    """
    draft = PostDraft(
        title=title,
        content=content,
        category=category,
        images=[await read_upload(upload) for upload in images or []],
        consent_accepted=consent_accepted,
        is_anonymous=is_anonymous,
    )
    return await SubmissionService(store, blobs).submit(draft, current_user)


@router.get("/", response_model=PostPage)
async def list_posts(
    store: StoreDep,
    cursor: str | None = Query(None, description="Id of the last post already seen"),
    search: str | None = Query(None, description="Whitespace-separated search terms"),
    category: str | None = Query(None, description="Only posts in this category"),
) -> PostPage:
    """List published posts, newest first."""
    items, next_cursor = FeedService(store).list_posts(
        cursor=cursor, search=search, category=category
    )
    return PostPage(
        items=[PostResponse.model_validate(item) for item in items],
        next_cursor=next_cursor,
    )


@router.get("/mine", response_model=list[PostResponse])
async def list_my_posts(store: StoreDep, current_user: CurrentUserDep) -> list[Document]:
    """The caller's own posts in every status."""
    return FeedService(store).posts_by_author(current_user["id"])


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, store: StoreDep, viewer: OptionalUserDep) -> Document:
    feed = FeedService(store)
    viewer_id = viewer["id"] if viewer else None
    post = feed.get_post(post_id, viewer_id=viewer_id)
    if post["author_id"] != viewer_id:
        feed.record_view(post_id)
        post["views"] += 1
    return post


@router.patch("/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: str,
    store: StoreDep,
    blobs: BlobStoreDep,
    current_user: CurrentUserDep,
    title: Annotated[str | None, Form()] = None,
    content: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File(description="Replaces the first image")] = None,
) -> Document:
    """Edit one of the caller's posts."""
    upload = await read_upload(image) if image is not None else None
    return await SubmissionService(store, blobs).edit(
        post_id,
        current_user["id"],
        title=title,
        content=content,
        category=category,
        image=upload,
    )

"""User profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from habersin.api.v1.dependencies import BlobStoreDep, CurrentUserDep, StoreDep
from habersin.schemas.user import SocialLinks, UserResponse
from habersin.services.profiles import ProfileService
from habersin.store.base import Document

from .posts import read_upload

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> Document:
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, store: StoreDep, blobs: BlobStoreDep) -> Document:
    return ProfileService(store, blobs).get_user(user_id)


@router.put("/me/social-links", response_model=UserResponse)
async def update_social_links(
    payload: SocialLinks,
    store: StoreDep,
    blobs: BlobStoreDep,
    current_user: CurrentUserDep,
) -> Document:
    return ProfileService(store, blobs).update_social_links(
        current_user["id"], payload.model_dump()
    )


@router.put("/me/photo", response_model=UserResponse)
async def update_photo(
    photo: Annotated[UploadFile, File()],
    store: StoreDep,
    blobs: BlobStoreDep,
    current_user: CurrentUserDep,
) -> Document:
    """Replace the caller's profile photo."""
    upload = await read_upload(photo)
    return await ProfileService(store, blobs).update_photo(current_user["id"], upload)

"""Moderation queue and decision endpoints."""

from fastapi import APIRouter

from habersin.api.v1.dependencies import CurrentUserDep, StoreDep
from habersin.schemas.moderation import ModerationDecision
from habersin.schemas.post import PostResponse
from habersin.services.moderation import ModerationService
from habersin.store.base import Document

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.get("/queue", response_model=list[PostResponse])
async def get_moderation_queue(store: StoreDep, current_user: CurrentUserDep) -> list[Document]:
    """Pending posts, newest first."""
    return await ModerationService(store).pending_queue(current_user["id"])


@router.post("/posts/{post_id}", response_model=PostResponse)
async def decide(
    post_id: str,
    payload: ModerationDecision,
    store: StoreDep,
    current_user: CurrentUserDep,
) -> Document:
    """Approve or reject a pending post and notify its author."""
    return await ModerationService(store).moderate(
        post_id, payload.decision, current_user["id"], payload.note
    )

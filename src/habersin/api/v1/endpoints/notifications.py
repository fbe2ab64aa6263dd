"""Notification endpoints."""

from fastapi import APIRouter, status

from habersin.api.v1.dependencies import CurrentUserDep, StoreDep
from habersin.schemas.notification import NotificationResponse
from habersin.services.notifications import NotificationService
from habersin.store.base import Document

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_unread(store: StoreDep, current_user: CurrentUserDep) -> list[Document]:
    """Unread notifications of the caller, newest first."""
    service = NotificationService(store)
    service.ensure_initialized(current_user["id"])
    return service.unread(current_user["id"])


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(notification_id: str, store: StoreDep, current_user: CurrentUserDep) -> None:
    NotificationService(store).mark_read(notification_id, current_user["id"])

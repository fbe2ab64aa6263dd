"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    id: str
    type: str
    message: str
    post_id: str | None = None
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

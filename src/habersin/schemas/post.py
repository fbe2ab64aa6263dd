"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostEdit(BaseModel):
    """Text fields an author may change; omitted fields keep their value."""

    title: str | None = Field(None, description="New title")
    content: str | None = Field(None, description="New body text")
    category: str | None = Field(None, description="New category")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    title: str
    content: str
    category: str
    images: list[str]
    author_id: str
    author_name: str
    is_anonymous: bool
    status: str
    likes: int
    dislikes: int
    views: int
    moderation_note: str | None = None
    moderated_by: str | None = None
    moderated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PostPage(BaseModel):
    """One page of the public feed."""

    items: list[PostResponse]
    next_cursor: str | None = Field(
        None, description="Pass as ``cursor`` to fetch the following page."
    )

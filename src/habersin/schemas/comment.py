"""Comment schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: str
    post_id: str
    content: str
    author_id: str
    author_name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

"""User profile schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SocialLinks(BaseModel):
    """Profile links; unknown networks are rejected."""

    twitter: str = ""
    facebook: str = ""
    instagram: str = ""
    linkedin: str = ""

    model_config = ConfigDict(extra="forbid")


class UserResponse(BaseModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    photo_url: str | None = None
    is_moderator: bool = False
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

"""Moderation-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ModerationDecision(BaseModel):
    """A moderator's decision on a pending post."""

    decision: Literal["approved", "rejected"]
    note: str | None = Field(None, max_length=1000, description="Reason shown to the author")

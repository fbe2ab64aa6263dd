"""Reaction schemas."""

from typing import Literal

from pydantic import BaseModel


class ReactionCreate(BaseModel):
    type: Literal["like", "dislike"]


class ReactionState(BaseModel):
    """The caller's reaction after a toggle, with the post's counters."""

    post_id: str
    type: Literal["like", "dislike"] | None
    likes: int
    dislikes: int

"""Like/dislike toggling with counters kept in step with reaction records."""

from __future__ import annotations

import logging

from habersin.core.errors import NotFoundError, ValidationError
from habersin.models.reaction import COUNTER_FIELDS, REACTION_TYPES, reaction_id
from habersin.store.base import DocumentStore

logger = logging.getLogger(__name__)


class ReactionService:
    """Applies the per-user reaction toggle to a post.

    Counter changes go through the store's atomic ``increment`` and happen in
    the same batch as the reaction write, so concurrent reactors on one post
    cannot lose updates.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def current(self, post_id: str, user_id: str) -> str | None:
        """Return the user's reaction type on the post, if any."""
        reaction = self.store.get("reactions", reaction_id(post_id, user_id))
        return reaction["type"] if reaction else None

    def react(self, post_id: str, user_id: str, reaction_type: str) -> str | None:
        """Toggle ``reaction_type`` for the user and return the resulting reaction.

        - no reaction: create it and count it
        - same reaction again: remove it and uncount it
        - other reaction: switch it and move the count over
        """
        if reaction_type not in REACTION_TYPES:
            raise ValidationError(f"Unknown reaction: {reaction_type}", code="invalid_reaction")

        doc_id = reaction_id(post_id, user_id)
        with self.store.batch():
            if not self.store.exists("posts", post_id):
                raise NotFoundError("Post not found")

            existing = self.store.get("reactions", doc_id)
            if existing is None:
                self.store.set(
                    "reactions",
                    doc_id,
                    {"post_id": post_id, "user_id": user_id, "type": reaction_type},
                )
                self.store.increment("posts", post_id, COUNTER_FIELDS[reaction_type], 1)
                result: str | None = reaction_type
            elif existing["type"] == reaction_type:
                self.store.delete("reactions", doc_id)
                self.store.increment("posts", post_id, COUNTER_FIELDS[reaction_type], -1)
                result = None
            else:
                previous = existing["type"]
                self.store.update("reactions", doc_id, {"type": reaction_type})
                self.store.increment("posts", post_id, COUNTER_FIELDS[previous], -1)
                self.store.increment("posts", post_id, COUNTER_FIELDS[reaction_type], 1)
                result = reaction_type

        logger.debug("Reaction of %s on %s is now %s", user_id, post_id, result)
        return result

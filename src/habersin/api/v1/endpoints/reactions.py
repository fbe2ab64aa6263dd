"""Like/dislike endpoints."""

from fastapi import APIRouter

from habersin.api.v1.dependencies import CurrentUserDep, StoreDep
from habersin.core.errors import NotFoundError
from habersin.schemas.reaction import ReactionCreate, ReactionState
from habersin.services.reactions import ReactionService
from habersin.store.base import DocumentStore

router = APIRouter(prefix="/posts/{post_id}/reactions", tags=["reactions"])


def _state(store: DocumentStore, post_id: str, reaction: str | None) -> ReactionState:
    post = store.get("posts", post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return ReactionState(
        post_id=post_id,
        type=reaction,
        likes=post["likes"],
        dislikes=post["dislikes"],
    )


@router.get("/me", response_model=ReactionState)
async def get_my_reaction(
    post_id: str, store: StoreDep, current_user: CurrentUserDep
) -> ReactionState:
    reaction = ReactionService(store).current(post_id, current_user["id"])
    return _state(store, post_id, reaction)


@router.post("/", response_model=ReactionState)
async def toggle_reaction(
    post_id: str,
    payload: ReactionCreate,
    store: StoreDep,
    current_user: CurrentUserDep,
) -> ReactionState:
    """Toggle the caller's like or dislike on a post."""
    reaction = ReactionService(store).react(post_id, current_user["id"], payload.type)
    return _state(store, post_id, reaction)

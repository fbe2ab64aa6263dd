"""Comment endpoints."""

from fastapi import APIRouter, status

from habersin.api.v1.dependencies import CurrentUserDep, StoreDep
from habersin.schemas.comment import CommentCreate, CommentResponse
from habersin.services.comments import CommentService
from habersin.services.profiles import display_name
from habersin.store.base import Document

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])


@router.get("/", response_model=list[CommentResponse])
async def list_comments(post_id: str, store: StoreDep) -> list[Document]:
    return CommentService(store).list_comments(post_id)


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    payload: CommentCreate,
    store: StoreDep,
    current_user: CurrentUserDep,
) -> Document:
    return CommentService(store).add_comment(
        post_id,
        current_user["id"],
        payload.content,
        author_name=display_name(current_user),
    )

"""Content report endpoints."""

from fastapi import APIRouter, Query, status

from habersin.api.v1.dependencies import CurrentUserDep, StoreDep
from habersin.models.report import REPORT_REASONS
from habersin.schemas.report import ReportCreate, ReportResponse
from habersin.services.profiles import display_name
from habersin.services.reports import ReportService
from habersin.store.base import Document

router = APIRouter(tags=["reports"])


@router.get("/reports/reasons", response_model=list[str])
async def list_report_reasons() -> list[str]:
    return list(REPORT_REASONS)


@router.post(
    "/posts/{post_id}/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def file_report(
    post_id: str,
    payload: ReportCreate,
    store: StoreDep,
    current_user: CurrentUserDep,
) -> Document:
    """Report a post; each user may report a post once."""
    return ReportService(store).file_report(
        post_id,
        current_user["id"],
        payload.reason,
        payload.description,
        reporter_name=display_name(current_user),
    )


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    store: StoreDep,
    current_user: CurrentUserDep,
    status_filter: str | None = Query(None, alias="status"),
) -> list[Document]:
    """Reports for moderators, newest first."""
    return ReportService(store).list_reports(current_user, status=status_filter)


@router.post("/reports/{report_id}/reviewed", response_model=ReportResponse)
async def mark_report_reviewed(
    report_id: str, store: StoreDep, current_user: CurrentUserDep
) -> Document:
    return ReportService(store).mark_reviewed(report_id, current_user)

"""Report schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReportCreate(BaseModel):
    reason: str = Field(..., description="One of the fixed report reasons")
    description: str = Field("", max_length=2000)


class ReportResponse(BaseModel):
    id: str
    post_id: str
    post_title: str | None = None
    reporter_id: str
    reporter_name: str | None = None
    reason: str
    description: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

"""Pydantic schemas for lifecycle, allocation and review requests."""

from typing import Optional

from pydantic import Field

from talentbridge.schemas import RequestSchema


class StatusChangeSchema(RequestSchema):
    """Schema for moving a candidate to another status."""

    next_status: str = Field(..., min_length=1, description="Target status")
    note: Optional[str] = Field(None, description="Optional note stored on the candidate")


class AllocateSchema(RequestSchema):
    """Schema for proposing a candidate to a JV."""

    target_jv_id: int = Field(..., gt=0, description="JV the candidate is proposed to")
    note: Optional[str] = None


class AcceptSchema(RequestSchema):
    """Schema for a JV accepting a proposal."""

    expected_start_date: str = Field(..., min_length=1, description="ISO date, e.g. 2025-01-01")


class RejectSchema(RequestSchema):
    """Schema for a JV declining a proposal."""

    reason: str = Field(..., min_length=1)


class ReviewSchema(RequestSchema):
    """Schema for recording a performance review."""

    rating: int = Field(..., ge=1, le=5)
    summary: Optional[str] = None
    need_hq_intervention: bool = False
    review_date: Optional[str] = None

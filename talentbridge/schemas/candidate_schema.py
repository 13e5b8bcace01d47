"""Pydantic schemas for candidate records."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from talentbridge.schemas import RequestSchema


class CandidateUpdateSchema(RequestSchema):
    """Descriptive candidate fields. Lifecycle fields are not accepted here."""

    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    resume_url: Optional[str] = Field(None, max_length=1000)
    function_role: Optional[str] = Field(None, max_length=200)
    tags: Optional[Union[List[str], str]] = None
    interview_notes: Optional[str] = None
    expected_salary: Optional[int] = Field(None, ge=0)
    interview_date: Optional[datetime] = None

    # Unknown keys (status, currentJvId, ...) are rejected instead of dropped
    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.lower() or None


class CandidateCreateSchema(CandidateUpdateSchema):
    """Schema for adding a candidate to the HQ pool."""

    name: str = Field(..., min_length=1, max_length=200)


class CommentCreateSchema(RequestSchema):
    content: str = Field(..., min_length=1)

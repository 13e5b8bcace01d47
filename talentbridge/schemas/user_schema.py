"""Pydantic schemas for authentication and directory management."""

from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from talentbridge.schemas import RequestSchema


class LoginSchema(RequestSchema):
    """Schema for user login."""

    email: str = Field(..., min_length=3, max_length=120)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class PartnerAssignmentSchema(RequestSchema):
    """
    Schema for relinking a partner user.

    ``jv_id`` null unlinks the user; omitting it leaves the link unchanged.
    """

    jv_id: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class ChangePasswordSchema(RequestSchema):
    current_password: str = ""
    new_password: str = ""


class ProfileUpdateSchema(RequestSchema):
    """Schema for a user editing their own name and email."""

    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=120)

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if "@" not in v:
            raise ValueError("email must be a valid address")
        return v.lower()

"""Pydantic schemas for superadmin school management."""

from datetime import datetime

from pydantic import EmailStr, Field

from schoolbase.infrastructure.api.schemas.base import CamelModel
from schoolbase.infrastructure.api.schemas.user_schemas import UserResponse


class CreateSchoolRequest(CamelModel):
    """Request body for creating a school and its first admin."""

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    max_students: int | None = Field(None, ge=0)
    max_teachers: int | None = Field(None, ge=0)
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=1)
    admin_first_name: str | None = None
    admin_last_name: str | None = None


class SchoolResponse(CamelModel):
    id: str
    school_number: str
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    max_students: int
    max_teachers: int
    valid_until: datetime
    last_reactivated_at: datetime | None = None
    created_at: datetime | None = None


class SchoolCreatedResponse(SchoolResponse):
    users: list[UserResponse] = Field(default_factory=list)


class SchoolListItem(SchoolResponse):
    user_count: int = Field(0, description="Number of accounts in the school")


class ReactivateSchoolResponse(CamelModel):
    message: str = "School reactivated successfully"
    school: SchoolResponse


class SchoolValidityResponse(CamelModel):
    school_id: str
    school_number: str
    name: str
    valid_until: datetime
    last_reactivated_at: datetime | None = None
    expired: bool
    days_remaining: int

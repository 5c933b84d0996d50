"""Pydantic schemas for account management and profiles."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, EmailStr, Field

from schoolbase.infrastructure.api.schemas.base import CamelModel


class SchoolRef(CamelModel):
    name: str
    school_number: str


class UserResponse(CamelModel):
    """Account as returned to administrators. Never includes secrets."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    school_id: str | None = None
    student_id: str | None = None
    student_class: str | None = None
    subjects: list[str] | None = None
    phone: str | None = None
    address: str | None = None
    is_active: bool
    created_at: datetime | None = None


class AdminResponse(UserResponse):
    school: SchoolRef | None = None


class CreateUserRequest(CamelModel):
    """Request body for adding an account to a school."""

    email: EmailStr
    password: str = Field(..., min_length=1)
    role: str = Field(..., description="ADMIN, TEACHER or STUDENT")
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    student_class: str | None = None
    subjects: list[str] | None = None
    school_id: str | None = Field(None, description="Target school (superadmin only)")


class BulkStudentRow(CamelModel):
    """One spreadsheet row. Fields are validated per row, not per request."""

    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    student_class: str | None = None
    phone: str | None = None
    address: str | None = None


class BulkCreateRequest(CamelModel):
    students: list[BulkStudentRow] = Field(default_factory=list)
    school_id: str | None = None


class BulkCreatedItem(CamelModel):
    email: str
    student_id: str


class BulkErrorItem(CamelModel):
    email: str | None = None
    error: str


class BulkCreateResponse(CamelModel):
    message: str
    success_count: int
    failure_count: int
    created: list[BulkCreatedItem]
    errors: list[BulkErrorItem]


class UpdateUserRequest(CamelModel):
    """Fields an administrator may change. Omitted fields are left alone."""

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    student_class: str | None = None
    subjects: list[str] | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=False)


class StatsResponse(CamelModel):
    teacher_count: int
    student_count: int


class ProfileResponse(CamelModel):
    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    created_at: datetime | None = None


class UpdateProfileRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None


class ProfileSummary(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str


class UpdateProfileResponse(CamelModel):
    message: str = "Profile updated successfully"
    user: ProfileSummary


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=1)


class MemberProfileResponse(CamelModel):
    """Profile of a student or teacher, including their school."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    student_id: str | None = None
    student_class: str | None = None
    subjects: list[str] | None = None
    created_at: datetime | None = None
    school: SchoolRef | None = None


class ResultsResponse(CamelModel):
    message: str = "Results feature coming soon"
    results: list[Any] = Field(default_factory=list)


class AttendanceResponse(CamelModel):
    message: str = "Attendance feature coming soon"
    attendance: list[Any] = Field(default_factory=list)

"""Pydantic request and response schemas for the HTTP API."""

from schoolbase.infrastructure.api.schemas.auth_schemas import (
    AuthResponse,
    LoginRequest,
    RegistrationResponse,
    SessionUser,
    SuperadminRegisterRequest,
    TwoFactorRequiredResponse,
    VerifyCodeRequest,
)
from schoolbase.infrastructure.api.schemas.base import (
    CamelModel,
    MessageResponse,
)
from schoolbase.infrastructure.api.schemas.catalogue_schemas import (
    ExamRequest,
    ExamResponse,
    ExamUpdateRequest,
    SubjectRequest,
    SubjectResponse,
)
from schoolbase.infrastructure.api.schemas.school_schemas import (
    CreateSchoolRequest,
    ReactivateSchoolResponse,
    SchoolCreatedResponse,
    SchoolListItem,
    SchoolResponse,
    SchoolValidityResponse,
)
from schoolbase.infrastructure.api.schemas.user_schemas import (
    AdminResponse,
    AttendanceResponse,
    BulkCreateRequest,
    BulkCreateResponse,
    ChangePasswordRequest,
    CreateUserRequest,
    MemberProfileResponse,
    ProfileResponse,
    ProfileSummary,
    ResultsResponse,
    StatsResponse,
    UpdateProfileRequest,
    UpdateProfileResponse,
    UpdateUserRequest,
    UserResponse,
)

__all__ = [
    "AdminResponse",
    "AttendanceResponse",
    "AuthResponse",
    "BulkCreateRequest",
    "BulkCreateResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "CreateSchoolRequest",
    "CreateUserRequest",
    "ExamRequest",
    "ExamResponse",
    "ExamUpdateRequest",
    "LoginRequest",
    "MemberProfileResponse",
    "MessageResponse",
    "ProfileResponse",
    "ProfileSummary",
    "ReactivateSchoolResponse",
    "RegistrationResponse",
    "ResultsResponse",
    "SchoolCreatedResponse",
    "SchoolListItem",
    "SchoolResponse",
    "SchoolValidityResponse",
    "SessionUser",
    "StatsResponse",
    "SubjectRequest",
    "SubjectResponse",
    "SuperadminRegisterRequest",
    "TwoFactorRequiredResponse",
    "UpdateProfileRequest",
    "UpdateProfileResponse",
    "UpdateUserRequest",
    "UserResponse",
    "VerifyCodeRequest",
]

"""Pydantic schemas for authentication endpoints."""

from pydantic import EmailStr, Field

from schoolbase.infrastructure.api.schemas.base import CamelModel


class SuperadminRegisterRequest(CamelModel):
    """Request body for superadmin self-registration."""

    email: EmailStr = Field(..., description="Superadmin email address")
    password: str = Field(..., min_length=1, description="Superadmin password")
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class RegistrationResponse(CamelModel):
    message: str = "Verification code sent to email"
    email: str


class VerifyCodeRequest(CamelModel):
    """Email plus the one-time code that was mailed to it."""

    email: str = Field(..., description="Superadmin email address")
    code: str = Field(..., description="6-digit one-time code")


class LoginRequest(CamelModel):
    """Login body. Which keys are required depends on ``role``.

    SUPERADMIN and TEACHER use email; ADMIN uses school number and email;
    STUDENT uses student ID.
    """

    role: str | None = Field(None, description="SUPERADMIN, ADMIN, TEACHER or STUDENT")
    password: str | None = None
    email: str | None = None
    school_number: str | None = None
    student_id: str | None = None


class SessionUser(CamelModel):
    """Account summary returned with a session token."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    school_name: str | None = None
    student_id: str | None = None


class AuthResponse(CamelModel):
    token: str = Field(..., description="Signed session token")
    user: SessionUser


class TwoFactorRequiredResponse(CamelModel):
    requires_2fa: bool = Field(True, alias="requires2FA")
    email: str

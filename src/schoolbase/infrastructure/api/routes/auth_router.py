"""Authentication API routes.

Provides superadmin registration and verification, role-dispatched login,
and completion of the superadmin two-factor step.
"""

from fastapi import APIRouter, status

from schoolbase.domain.entities import LoginStage
from schoolbase.domain.services import (
    AuthService,
    LoginCommand,
    SuperadminVerificationService,
    claims_for,
)
from schoolbase.infrastructure.api.dependencies import DbSession, Mailer
from schoolbase.infrastructure.api.schemas import (
    AuthResponse,
    LoginRequest,
    RegistrationResponse,
    SessionUser,
    SuperadminRegisterRequest,
    TwoFactorRequiredResponse,
    VerifyCodeRequest,
)
from schoolbase.infrastructure.auth import jwt_service
from schoolbase.infrastructure.persistence.models import UserModel

router = APIRouter()


def _auth_response(user: UserModel, token: str) -> AuthResponse:
    school = user.school
    return AuthResponse(
        token=token,
        user=SessionUser(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            school_name=school.name if school is not None else None,
            student_id=user.student_id,
        ),
    )


@router.post(
    "/superadmin/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegistrationResponse,
)
async def register_superadmin(
    request: SuperadminRegisterRequest,
    session: DbSession,
    mailer: Mailer,
) -> RegistrationResponse:
    """Register a superadmin and email a verification code.

    The account cannot log in until the code is presented to
    ``/superadmin/verify-email``.
    """
    service = SuperadminVerificationService(session, mailer)
    user = await service.register(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return RegistrationResponse(email=user.email)


@router.post("/superadmin/verify-email", response_model=AuthResponse)
async def verify_superadmin_email(
    request: VerifyCodeRequest,
    session: DbSession,
    mailer: Mailer,
) -> AuthResponse:
    """Verify a superadmin email and start a session."""
    service = SuperadminVerificationService(session, mailer)
    user = await service.verify_email(request.email, request.code)
    return _auth_response(user, jwt_service.issue(claims_for(user)))


@router.post(
    "/login",
    response_model=AuthResponse | TwoFactorRequiredResponse,
)
async def login(
    request: LoginRequest,
    session: DbSession,
    mailer: Mailer,
) -> AuthResponse | TwoFactorRequiredResponse:
    """Log in with the identity key of the requested role.

    Superadmins receive a ``requires2FA`` response and an emailed code;
    every other role receives a session token directly.
    """
    service = AuthService(session, SuperadminVerificationService(session, mailer))
    result = await service.login(
        LoginCommand(
            role=request.role,
            password=request.password,
            email=request.email,
            school_number=request.school_number,
            student_id=request.student_id,
        )
    )
    if result.stage is LoginStage.PENDING_TWO_FACTOR:
        return TwoFactorRequiredResponse(email=result.user.email)
    return _auth_response(result.user, result.token)


@router.post("/superadmin/verify-2fa", response_model=AuthResponse)
async def verify_two_factor(
    request: VerifyCodeRequest,
    session: DbSession,
    mailer: Mailer,
) -> AuthResponse:
    """Complete a superadmin login with the emailed code."""
    service = SuperadminVerificationService(session, mailer)
    user = await service.verify_two_factor(request.email, request.code)
    return _auth_response(user, jwt_service.issue(claims_for(user)))

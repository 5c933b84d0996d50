"""Role-dispatched login.

Each role logs in with a different identity key:

    SUPERADMIN  email + password, then a 2FA code
    ADMIN       school number + email + password
    TEACHER     email + password
    STUDENT     student ID + password

Tenant roles are refused once their school's validity has passed, even with
correct credentials.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.exceptions import (
    EmailNotVerifiedError,
    UnauthorizedError,
    ValidationError,
)
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import LoginStage, Role, SessionClaims, utc_now
from schoolbase.domain.services.access_guard import ensure_tenant_active
from schoolbase.domain.services.verification_service import SuperadminVerificationService
from schoolbase.infrastructure.auth import (
    JWTService,
    dummy_password_hash,
    hash_password,
    jwt_service,
    needs_rehash,
    verify_password,
)
from schoolbase.infrastructure.persistence.models import UserModel
from schoolbase.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials or account inactive"


@dataclass(frozen=True)
class LoginCommand:
    role: str | None
    password: str | None = None
    email: str | None = None
    school_number: str | None = None
    student_id: str | None = None


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt that passed the credential check.

    ``token`` is set only when ``stage`` is AUTHENTICATED.
    """

    stage: LoginStage
    user: UserModel
    token: str | None = None


def claims_for(user: UserModel) -> SessionClaims:
    """Build the session claims for an authenticated account."""
    school = user.school
    return SessionClaims(
        account_id=user.id,
        role=Role(user.role),
        school_id=user.school_id,
        school_number=school.school_number if school is not None else None,
        email=user.email,
    )


class AuthService:
    """Checks credentials and mints session tokens."""

    def __init__(
        self,
        session: AsyncSession,
        verification: SuperadminVerificationService,
        tokens: JWTService = jwt_service,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session = session
        self.user_repo = UserRepository(session)
        self.verification = verification
        self.tokens = tokens
        self.clock = clock
        self._handlers: dict[Role, Callable[[LoginCommand], Awaitable[LoginResult]]] = {
            Role.SUPERADMIN: self._login_superadmin,
            Role.ADMIN: self._login_admin,
            Role.TEACHER: self._login_teacher,
            Role.STUDENT: self._login_student,
        }

    async def login(self, command: LoginCommand) -> LoginResult:
        """Authenticate ``command`` with the rules of its role.

        Raises:
            ValidationError: Unknown role or missing identity key.
            UnauthorizedError: Wrong credentials or inactive account.
            EmailNotVerifiedError: Superadmin has not verified their email.
            TenantExpiredError: The account's school is past its validity.
        """
        try:
            role = Role(command.role)
        except ValueError:
            raise ValidationError("Invalid role specified") from None
        return await self._handlers[role](command)

    def issue_token(self, user: UserModel) -> str:
        return self.tokens.issue(claims_for(user))

    async def _login_superadmin(self, command: LoginCommand) -> LoginResult:
        if not command.email:
            raise ValidationError("Email is required")
        user = await self.user_repo.get_by_email_and_role(command.email, Role.SUPERADMIN)
        if not self._credentials_ok(user, command.password):
            raise UnauthorizedError("Invalid credentials")
        if not user.is_email_verified:
            raise EmailNotVerifiedError()
        self._upgrade_hash(user, command.password)

        await self.verification.begin_two_factor(user)
        return LoginResult(stage=LoginStage.PENDING_TWO_FACTOR, user=user)

    async def _login_admin(self, command: LoginCommand) -> LoginResult:
        if not command.school_number:
            raise ValidationError("School number is required")
        if not command.email:
            raise ValidationError("Email is required")
        user = await self.user_repo.get_admin_in_school(command.email, command.school_number)
        return await self._complete_member_login(user, command.password)

    async def _login_teacher(self, command: LoginCommand) -> LoginResult:
        if not command.email:
            raise ValidationError("Email is required")
        user = await self.user_repo.get_by_email_and_role(command.email, Role.TEACHER)
        return await self._complete_member_login(user, command.password)

    async def _login_student(self, command: LoginCommand) -> LoginResult:
        if not command.student_id:
            raise ValidationError("Student ID is required")
        user = await self.user_repo.get_student_by_student_id(command.student_id)
        return await self._complete_member_login(user, command.password)

    async def _complete_member_login(self, user: UserModel | None, password: str | None) -> LoginResult:
        if not self._credentials_ok(user, password) or user.school is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)
        ensure_tenant_active(user.school.valid_until, self.clock())
        self._upgrade_hash(user, password)

        await self.user_repo.update_last_login(user.id)
        await self.session.commit()
        logger.info("User logged in", user_id=user.id, role=user.role, school_id=user.school_id)
        return LoginResult(
            stage=LoginStage.AUTHENTICATED,
            user=user,
            token=self.issue_token(user),
        )

    @staticmethod
    def _credentials_ok(user: UserModel | None, password: str | None) -> bool:
        """Verify the password; unknown and inactive accounts never pass.

        A hash is always verified so that timing does not reveal whether the
        identity exists.
        """
        if user is None:
            verify_password(password or "", dummy_password_hash())
            return False
        matches = verify_password(password or "", user.password_hash)
        return matches and user.is_active

    @staticmethod
    def _upgrade_hash(user: UserModel, password: str | None) -> None:
        """Re-hash a verified password stored with outdated cost parameters."""
        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password or "")
            logger.info("Password hash upgraded", user_id=user.id)

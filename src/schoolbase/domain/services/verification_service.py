"""Superadmin email verification and two-factor login.

Every code is persisted and committed before the email carrying it is sent,
so a mail failure never loses a code; the user can ask for a new one by
logging in again. Codes are compared in constant time and cleared once used.
There is no attempt counter.
"""

from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.config import get_settings
from schoolbase.core.exceptions import InvalidOrExpiredCodeError
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import (
    EmailVerificationState,
    Role,
    TwoFactorChallenge,
    codes_match,
    email_verification_state,
    generate_code,
    utc_now,
)
from schoolbase.infrastructure.auth import hash_password
from schoolbase.infrastructure.persistence.models import UserModel
from schoolbase.infrastructure.persistence.repositories import UserRepository
from schoolbase.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)


class SuperadminVerificationService:
    """Drives a superadmin through registration, verification and 2FA."""

    def __init__(
        self,
        session: AsyncSession,
        email_service: EmailService,
        clock: Callable[[], datetime] = utc_now,
        two_factor_ttl: timedelta | None = None,
    ) -> None:
        """Initialize the verification service.

        Args:
            session: SQLAlchemy async session.
            email_service: Mail collaborator used for code delivery.
            clock: Source of the current UTC time.
            two_factor_ttl: Validity window of login codes. Defaults to
                ``two_factor_ttl_minutes`` from settings.
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.email_service = email_service
        self.clock = clock
        self.two_factor_ttl = two_factor_ttl or timedelta(
            minutes=get_settings().two_factor_ttl_minutes
        )

    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserModel:
        """Create an unverified superadmin and mail it a verification code.

        Returns:
            The created account, in PENDING_EMAIL_VERIFICATION.

        Raises:
            ConflictError: If the email is already registered.
        """
        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.SUPERADMIN.value,
            is_active=True,
            is_email_verified=False,
            verification_code=generate_code(),
        )
        await self.user_repo.create(user)
        await self.session.commit()
        logger.info("Superadmin registered, verification pending", user_id=user.id)

        delivered = await self.email_service.send_verification_code(
            user.email, user.verification_code, first_name=user.first_name
        )
        if not delivered:
            logger.warning("Verification code email not delivered", user_id=user.id)
        return user

    async def verify_email(self, email: str, code: str) -> UserModel:
        """Complete email verification with the code issued at registration.

        Raises:
            InvalidOrExpiredCodeError: If there is no pending verification for
                ``email`` or the code does not match.
        """
        user = await self.user_repo.get_by_email_and_role(email, Role.SUPERADMIN)
        state = email_verification_state(user)
        if state is not EmailVerificationState.PENDING_EMAIL_VERIFICATION or not codes_match(
            user.verification_code, code
        ):
            logger.info("Email verification failed", state=state.value)
            raise InvalidOrExpiredCodeError("Invalid verification code")

        user.is_email_verified = True
        user.verification_code = None
        await self.user_repo.update(user)
        await self.session.commit()
        logger.info("Superadmin email verified", user_id=user.id)
        return user

    async def begin_two_factor(self, user: UserModel) -> TwoFactorChallenge:
        """Issue a fresh login code, replacing any outstanding one."""
        challenge = TwoFactorChallenge.issue(self.clock(), self.two_factor_ttl)
        user.two_factor_code = challenge.code
        user.two_factor_expires = challenge.expires_at
        await self.user_repo.update(user)
        await self.session.commit()
        logger.info("Two-factor challenge issued", user_id=user.id)

        delivered = await self.email_service.send_two_factor_code(
            user.email,
            challenge.code,
            ttl_minutes=int(self.two_factor_ttl.total_seconds() // 60),
        )
        if not delivered:
            logger.warning("Two-factor code email not delivered", user_id=user.id)
        return challenge

    async def verify_two_factor(self, email: str, code: str) -> UserModel:
        """Complete a login with the emailed code.

        A wrong code leaves the outstanding challenge untouched. A matching
        code is cleared whether or not it has expired, so it can never be
        presented twice.

        Raises:
            InvalidOrExpiredCodeError: If the code is wrong, cleared or expired.
        """
        user = await self.user_repo.get_by_email_and_role(email, Role.SUPERADMIN)
        challenge = TwoFactorChallenge.of(user) if user is not None else None
        if challenge is None or not codes_match(challenge.code, code):
            logger.info("Two-factor verification failed: no matching code")
            raise InvalidOrExpiredCodeError("Invalid or expired 2FA code")

        now = self.clock()
        user.two_factor_code = None
        user.two_factor_expires = None
        if not challenge.accepts(code, now):
            await self.user_repo.update(user)
            await self.session.commit()
            logger.info("Two-factor verification failed: code expired", user_id=user.id)
            raise InvalidOrExpiredCodeError("Invalid or expired 2FA code")

        user.last_login = now
        await self.user_repo.update(user)
        await self.session.commit()
        logger.info("Superadmin authenticated", user_id=user.id)
        return user

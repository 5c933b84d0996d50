"""Bootstrap of verified superadmin accounts.

Used at startup (from settings) and by the ``create-superadmin`` command.
Accounts created here skip the email verification flow because whoever
controls the deployment's configuration is already trusted.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.exceptions import ConflictError
from schoolbase.domain.entities import Role
from schoolbase.infrastructure.auth import hash_password


class SuperadminCreationError(Exception):
    """Raised when superadmin creation fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SuperadminService:
    """Creates superadmin accounts outside the registration flow."""

    @staticmethod
    async def create_superadmin(
        email: str,
        password: str,
        session: AsyncSession,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> str:
        """Create an active, email-verified superadmin.

        Args:
            email: Email address for the superadmin.
            password: Plaintext password; hashed before storage.
            session: Database session. Committed on success.
            first_name: Optional first name.
            last_name: Optional last name.

        Returns:
            ID of the created account.

        Raises:
            SuperadminCreationError: If the email is taken or the insert fails.
        """
        from schoolbase.infrastructure.persistence.models import UserModel
        from schoolbase.infrastructure.persistence.repositories import UserRepository

        if not email or not password:
            raise SuperadminCreationError("Email and password are required")

        user_repo = UserRepository(session)
        if await user_repo.get_by_email(email) is not None:
            raise SuperadminCreationError(f"An account with email '{email}' already exists")

        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.SUPERADMIN.value,
            is_active=True,
            is_email_verified=True,
        )
        try:
            await user_repo.create(user)
            await session.commit()
        except ConflictError as e:
            await session.rollback()
            raise SuperadminCreationError(e.message) from e
        return user.id

    @staticmethod
    async def has_superadmin(session: AsyncSession) -> bool:
        """Check whether any superadmin account exists."""
        from schoolbase.infrastructure.persistence.repositories import UserRepository

        return await UserRepository(session).has_role(Role.SUPERADMIN)

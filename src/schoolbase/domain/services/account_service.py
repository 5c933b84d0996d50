"""Operations on a single account: profiles, passwords and activation."""

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.exceptions import NotFoundError, ValidationError
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import Role, SessionClaims
from schoolbase.infrastructure.auth import hash_password, verify_password
from schoolbase.infrastructure.persistence.models import UserModel
from schoolbase.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


class AccountService:
    """Service for account self-service and superadmin account control."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)

    async def get_account(self, account_id: str) -> UserModel:
        """Load an account.

        Raises:
            NotFoundError: If the account does not exist.
        """
        user = await self.user_repo.get_by_id(account_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_own_profile(self, claims: SessionClaims) -> UserModel:
        """Load the caller's own account, which must still have the token's role."""
        user = await self.get_account(claims.account_id)
        if user.role != claims.role.value:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self,
        claims: SessionClaims,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
    ) -> UserModel:
        """Update the caller's name and email. ``None`` leaves a field unchanged.

        Raises:
            ConflictError: If the new email belongs to another account.
        """
        user = await self.get_own_profile(claims)
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        if email is not None:
            user.email = email
        try:
            await self.user_repo.update(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Profile updated", user_id=user.id)
        return user

    async def change_password(
        self,
        claims: SessionClaims,
        current_password: str,
        new_password: str,
    ) -> None:
        """Replace the caller's password after checking the current one.

        Raises:
            ValidationError: If the current password is wrong or the new one is empty.
        """
        user = await self.get_own_profile(claims)
        if not verify_password(current_password or "", user.password_hash):
            raise ValidationError("Incorrect current password")
        if not new_password:
            raise ValidationError("New password is required")
        user.password_hash = hash_password(new_password)
        await self.user_repo.update(user)
        await self.session.commit()
        logger.info("Password changed", user_id=user.id)

    async def set_active(self, account_id: str, is_active: bool) -> UserModel:
        """Activate or deactivate any account. Inactive accounts cannot log in."""
        user = await self.get_account(account_id)
        user.is_active = is_active
        await self.user_repo.update(user)
        await self.session.commit()
        logger.info("Account activation changed", user_id=user.id, is_active=is_active)
        return user

    async def delete_account(self, claims: SessionClaims, account_id: str) -> None:
        """Hard-delete an account.

        Raises:
            ValidationError: If a superadmin tries to delete themselves.
            NotFoundError: If the account does not exist.
        """
        if claims.role is Role.SUPERADMIN and account_id == claims.account_id:
            raise ValidationError("You cannot delete your own account")
        user = await self.get_account(account_id)
        await self.user_repo.delete(user)
        await self.session.commit()
        logger.info("Account deleted", user_id=account_id, role=user.role)

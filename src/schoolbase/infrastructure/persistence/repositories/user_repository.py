"""User repository for database operations."""

from datetime import datetime, timezone

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.domain.entities import Role
from schoolbase.infrastructure.persistence.models import SchoolModel, UserModel
from schoolbase.infrastructure.persistence.repositories.conflicts import (
    flush_or_conflict,
    insert_or_conflict,
)


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Insert a user.

        Raises:
            ConflictError: If the email or student ID is already taken.
        """
        return await insert_or_conflict(self.session, user)

    async def get_by_id(self, user_id: str) -> UserModel | None:
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_email_and_role(self, email: str, role: Role) -> UserModel | None:
        """Get the account with ``email`` if it has ``role``."""
        result = await self.session.execute(
            select(UserModel).where(
                and_(UserModel.email == email, UserModel.role == role.value)
            )
        )
        return result.scalar_one_or_none()

    async def get_student_by_student_id(self, student_id: str) -> UserModel | None:
        result = await self.session.execute(
            select(UserModel).where(
                and_(
                    UserModel.student_id == student_id,
                    UserModel.role == Role.STUDENT.value,
                )
            )
        )
        return result.scalar_one_or_none()

    async def get_admin_in_school(self, email: str, school_number: str) -> UserModel | None:
        """Get an ADMIN account by email within the school with ``school_number``."""
        result = await self.session.execute(
            select(UserModel)
            .join(SchoolModel, UserModel.school_id == SchoolModel.id)
            .where(
                and_(
                    UserModel.email == email,
                    UserModel.role == Role.ADMIN.value,
                    SchoolModel.school_number == school_number,
                )
            )
        )
        return result.scalar_one_or_none()

    async def student_id_exists(self, student_id: str) -> bool:
        """Check whether a student ID is already allocated."""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.student_id == student_id).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def has_role(self, role: Role) -> bool:
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.role == role.value).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def count_by_role(self, school_id: str, role: Role) -> int:
        result = await self.session.execute(
            select(func.count(UserModel.id)).where(
                and_(UserModel.school_id == school_id, UserModel.role == role.value)
            )
        )
        return result.scalar_one()

    async def list_by_school_and_role(self, school_id: str, role: Role) -> list[UserModel]:
        result = await self.session.execute(
            select(UserModel)
            .where(and_(UserModel.school_id == school_id, UserModel.role == role.value))
            .order_by(UserModel.created_at.asc())
        )
        return list(result.scalars().all())

    async def list_by_role(self, role: Role) -> list[UserModel]:
        """List accounts with ``role`` across all schools, newest first."""
        result = await self.session.execute(
            select(UserModel)
            .where(UserModel.role == role.value)
            .order_by(UserModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_students_without_student_id(self) -> list[UserModel]:
        result = await self.session.execute(
            select(UserModel)
            .where(
                and_(
                    UserModel.role == Role.STUDENT.value,
                    UserModel.student_id.is_(None),
                    UserModel.school_id.is_not(None),
                )
            )
            .order_by(UserModel.created_at.asc())
        )
        return list(result.scalars().all())

    async def update(self, user: UserModel) -> UserModel:
        """Flush changes made to ``user``.

        Raises:
            ConflictError: If a changed email collides with another account.
        """
        await flush_or_conflict(self.session)
        return user

    async def delete(self, user: UserModel) -> None:
        await self.session.delete(user)
        await self.session.flush()

    async def update_last_login(self, user_id: str) -> None:
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(last_login=datetime.now(timezone.utc))
        )

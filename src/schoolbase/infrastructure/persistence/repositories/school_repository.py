"""School repository for database operations."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.infrastructure.persistence.models import (
    ExamScheduleModel,
    SchoolModel,
    UserModel,
)
from schoolbase.infrastructure.persistence.repositories.conflicts import (
    flush_or_conflict,
    insert_or_conflict,
)


class SchoolRepository:
    """Repository for school database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, school: SchoolModel) -> SchoolModel:
        """Insert a school.

        Raises:
            ConflictError: If the school number is already taken.
        """
        return await insert_or_conflict(self.session, school)

    async def get_by_id(self, school_id: str) -> SchoolModel | None:
        result = await self.session.execute(
            select(SchoolModel).where(SchoolModel.id == school_id)
        )
        return result.scalar_one_or_none()

    async def school_number_exists(self, school_number: str) -> bool:
        """Check whether a school number is already allocated."""
        result = await self.session.execute(
            select(SchoolModel.id).where(SchoolModel.school_number == school_number).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def list_all(self) -> list[SchoolModel]:
        result = await self.session.execute(
            select(SchoolModel).order_by(SchoolModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_with_user_counts(self) -> list[tuple[SchoolModel, int]]:
        """List schools together with the number of accounts in each.

        Returns:
            (school, user_count) pairs, newest school first.
        """
        user_count = (
            select(func.count(UserModel.id))
            .where(UserModel.school_id == SchoolModel.id)
            .correlate(SchoolModel)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(SchoolModel, user_count).order_by(SchoolModel.created_at.desc())
        )
        return [(school, count) for school, count in result.all()]

    async def update(self, school: SchoolModel) -> SchoolModel:
        await flush_or_conflict(self.session)
        return school

    async def delete(self, school: SchoolModel) -> None:
        """Delete a school together with its accounts and exam schedules."""
        await self.session.execute(
            delete(UserModel).where(UserModel.school_id == school.id)
        )
        await self.session.execute(
            delete(ExamScheduleModel).where(ExamScheduleModel.school_id == school.id)
        )
        await self.session.delete(school)
        await self.session.flush()

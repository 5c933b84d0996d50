"""Subject repository for database operations."""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.infrastructure.persistence.models import SubjectModel
from schoolbase.infrastructure.persistence.repositories.conflicts import insert_or_conflict


class SubjectRepository:
    """Repository for the subject catalogue."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, subject: SubjectModel) -> SubjectModel:
        """Insert a subject.

        Raises:
            ConflictError: If the name already exists in the section.
        """
        return await insert_or_conflict(self.session, subject)

    async def get_by_id(self, subject_id: str) -> SubjectModel | None:
        result = await self.session.execute(
            select(SubjectModel).where(SubjectModel.id == subject_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name_and_section(self, name: str, section: str) -> SubjectModel | None:
        result = await self.session.execute(
            select(SubjectModel).where(
                and_(SubjectModel.name == name, SubjectModel.section == section)
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[SubjectModel]:
        """List subjects ordered by section, category, then name."""
        result = await self.session.execute(
            select(SubjectModel).order_by(
                SubjectModel.section.asc(),
                SubjectModel.category.asc(),
                SubjectModel.name.asc(),
            )
        )
        return list(result.scalars().all())

    async def delete(self, subject: SubjectModel) -> None:
        await self.session.delete(subject)
        await self.session.flush()

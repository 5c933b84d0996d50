"""Exam schedule repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.infrastructure.persistence.models import ExamScheduleModel


class ExamScheduleRepository:
    """Repository for school-scoped exam schedules."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, exam: ExamScheduleModel) -> ExamScheduleModel:
        self.session.add(exam)
        await self.session.flush()
        return exam

    async def get_by_id(self, exam_id: str) -> ExamScheduleModel | None:
        result = await self.session.execute(
            select(ExamScheduleModel).where(ExamScheduleModel.id == exam_id)
        )
        return result.scalar_one_or_none()

    async def list_by_school(self, school_id: str) -> list[ExamScheduleModel]:
        """List a school's exams, soonest first."""
        result = await self.session.execute(
            select(ExamScheduleModel)
            .where(ExamScheduleModel.school_id == school_id)
            .order_by(ExamScheduleModel.exam_date.asc())
        )
        return list(result.scalars().all())

    async def update(self, exam: ExamScheduleModel) -> ExamScheduleModel:
        await self.session.flush()
        return exam

    async def delete(self, exam: ExamScheduleModel) -> None:
        await self.session.delete(exam)
        await self.session.flush()

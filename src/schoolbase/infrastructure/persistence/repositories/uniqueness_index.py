"""Store-backed uniqueness probes for the identifier allocator."""

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.infrastructure.persistence.repositories.school_repository import (
    SchoolRepository,
)
from schoolbase.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)


class StoreUniquenessIndex:
    """Answers "is this identifier taken?" from the schools and users tables."""

    def __init__(self, session: AsyncSession) -> None:
        self.schools = SchoolRepository(session)
        self.users = UserRepository(session)

    async def school_number_exists(self, school_number: str) -> bool:
        return await self.schools.school_number_exists(school_number)

    async def student_id_exists(self, student_id: str) -> bool:
        return await self.users.student_id_exists(student_id)

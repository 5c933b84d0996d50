"""School (tenant) lifecycle managed by superadmins."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.config import get_settings
from schoolbase.core.exceptions import NotFoundError, ValidationError
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import Role, SchoolValidity, add_months, utc_now
from schoolbase.domain.services.identifier_allocator import (
    SCHOOL_NUMBER_FIELD,
    IdentifierAllocator,
)
from schoolbase.infrastructure.auth import hash_password
from schoolbase.infrastructure.persistence.models import SchoolModel, UserModel
from schoolbase.infrastructure.persistence.repositories import (
    SchoolRepository,
    StoreUniquenessIndex,
    UserRepository,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreateSchoolCommand:
    name: str
    admin_email: str
    admin_password: str
    admin_first_name: str | None = None
    admin_last_name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    max_students: int | None = None
    max_teachers: int | None = None


class SchoolService:
    """Creates, lists, reactivates and deletes schools."""

    def __init__(
        self,
        session: AsyncSession,
        allocator: IdentifierAllocator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        settings = get_settings()
        self.session = session
        self.school_repo = SchoolRepository(session)
        self.user_repo = UserRepository(session)
        self.allocator = allocator or IdentifierAllocator(
            StoreUniquenessIndex(session),
            max_attempts=settings.allocation_max_attempts,
        )
        self.clock = clock
        self.validity_months = settings.school_validity_months
        self.default_max_students = settings.default_max_students
        self.default_max_teachers = settings.default_max_teachers

    async def create_school(self, command: CreateSchoolCommand) -> tuple[SchoolModel, UserModel]:
        """Create a school with a freshly allocated number and its first ADMIN.

        The school is valid for ``school_validity_months`` from now.

        Returns:
            The created school and its admin account.

        Raises:
            ValidationError: If the name or admin credentials are missing.
            ConflictError: If the admin email is already registered.
            AllocationExhaustedError: If no school number could be allocated.
        """
        if not command.name:
            raise ValidationError("School name is required")
        if not command.admin_email or not command.admin_password:
            raise ValidationError("Admin email and password are required")

        now = self.clock()

        async def insert(school_number: str) -> SchoolModel:
            school = SchoolModel(
                school_number=school_number,
                name=command.name,
                address=command.address,
                phone=command.phone,
                email=command.email,
                max_students=command.max_students or self.default_max_students,
                max_teachers=command.max_teachers or self.default_max_teachers,
                valid_until=add_months(now, self.validity_months),
            )
            return await self.school_repo.create(school)

        try:
            school = await self.allocator.insert_with_retry(
                self.allocator.allocate_school_number, insert, SCHOOL_NUMBER_FIELD
            )
            admin = UserModel(
                email=command.admin_email,
                password_hash=hash_password(command.admin_password),
                first_name=command.admin_first_name,
                last_name=command.admin_last_name,
                role=Role.ADMIN.value,
                school_id=school.id,
                is_active=True,
            )
            await self.user_repo.create(admin)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "School created",
            school_id=school.id,
            school_number=school.school_number,
            admin_id=admin.id,
        )
        return school, admin

    async def get_school(self, school_id: str) -> SchoolModel:
        school = await self.school_repo.get_by_id(school_id)
        if school is None:
            raise NotFoundError("School not found")
        return school

    async def list_schools(self) -> list[tuple[SchoolModel, int]]:
        """List schools with the number of accounts in each."""
        return await self.school_repo.list_with_user_counts()

    async def reactivate_school(self, school_id: str) -> SchoolModel:
        """Extend validity to ``school_validity_months`` from now.

        Raises:
            NotFoundError: If the school does not exist.
        """
        school = await self.get_school(school_id)
        now = self.clock()
        school.valid_until = add_months(now, self.validity_months)
        school.last_reactivated_at = now
        await self.school_repo.update(school)
        await self.session.commit()
        logger.info(
            "School reactivated",
            school_id=school.id,
            valid_until=school.valid_until.isoformat(),
        )
        return school

    async def delete_school(self, school_id: str) -> None:
        """Delete a school and every account in it.

        Raises:
            NotFoundError: If the school does not exist.
        """
        school = await self.get_school(school_id)
        await self.school_repo.delete(school)
        await self.session.commit()
        logger.info("School deleted", school_id=school_id, school_number=school.school_number)

    async def list_admins(self) -> list[UserModel]:
        """List ADMIN accounts of all schools, newest first."""
        return await self.user_repo.list_by_role(Role.ADMIN)

    async def validity_report(self) -> list[SchoolValidity]:
        """Evaluate every school's validity at the current time."""
        now = self.clock()
        return [
            SchoolValidity.evaluate(
                school_id=school.id,
                school_number=school.school_number,
                name=school.name,
                valid_until=school.valid_until,
                last_reactivated_at=school.last_reactivated_at,
                now=now,
            )
            for school in await self.school_repo.list_all()
        ]

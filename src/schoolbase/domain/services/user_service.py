"""School membership management: admins, teachers and students.

ADMIN callers always act on their own school. SUPERADMIN callers name the
school explicitly. Students get a student ID allocated under their school's
number; capacity limits are checked before any insert.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.config import get_settings
from schoolbase.core.exceptions import (
    ConflictError,
    NotFoundError,
    SchoolBaseError,
    ValidationError,
)
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import SCHOOL_MEMBER_ROLES, Role, SessionClaims
from schoolbase.domain.services.access_guard import ensure_tenant_scope, resolve_school_id
from schoolbase.domain.services.identifier_allocator import (
    STUDENT_ID_FIELD,
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

UPDATABLE_FIELDS = ("first_name", "last_name", "phone", "address", "student_class", "subjects")
BULK_REQUIRED_FIELDS = ("email", "password", "first_name", "last_name", "student_class")


@dataclass(frozen=True)
class NewMember:
    email: str
    password: str
    role: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    student_class: str | None = None
    subjects: list[str] | None = None


@dataclass
class BulkCreateResult:
    """Per-row outcome of a bulk student import."""

    total: int
    created: list[dict[str, str]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Processed {self.total} students"


class UserService:
    """Creates, updates and lists the accounts of a school."""

    def __init__(
        self,
        session: AsyncSession,
        allocator: IdentifierAllocator | None = None,
    ) -> None:
        self.session = session
        self.school_repo = SchoolRepository(session)
        self.user_repo = UserRepository(session)
        self.allocator = allocator or IdentifierAllocator(
            StoreUniquenessIndex(session),
            max_attempts=get_settings().allocation_max_attempts,
        )

    async def _load_school(self, school_id: str) -> SchoolModel:
        school = await self.school_repo.get_by_id(school_id)
        if school is None:
            raise NotFoundError("School not found")
        return school

    async def _insert_member(self, school: SchoolModel, member: NewMember, role: Role) -> UserModel:
        """Insert one account, allocating a student ID for students."""

        async def insert(student_id: str | None) -> UserModel:
            user = UserModel(
                email=member.email,
                password_hash=hash_password(member.password),
                first_name=member.first_name,
                last_name=member.last_name,
                role=role.value,
                school_id=school.id,
                student_id=student_id,
                student_class=member.student_class,
                subjects=member.subjects,
                phone=member.phone,
                address=member.address,
                is_active=True,
            )
            return await self.user_repo.create(user)

        if role is not Role.STUDENT:
            return await insert(None)
        return await self.allocator.insert_with_retry(
            lambda: self.allocator.allocate_student_id(school.school_number),
            insert,
            STUDENT_ID_FIELD,
        )

    async def create_user(
        self,
        claims: SessionClaims,
        member: NewMember,
        school_id: str | None = None,
    ) -> UserModel:
        """Create an ADMIN, TEACHER or STUDENT in a school.

        Raises:
            ValidationError: Invalid role, missing fields, or capacity reached.
            NotFoundError: If the school does not exist.
            ConflictError: If the email is already registered.
        """
        target_school_id = resolve_school_id(claims, school_id)
        try:
            role = Role(member.role)
        except ValueError:
            raise ValidationError("Invalid role") from None
        if role not in SCHOOL_MEMBER_ROLES:
            raise ValidationError("Invalid role")
        if not member.email or not member.password:
            raise ValidationError("Email and password are required")

        school = await self._load_school(target_school_id)
        if role is Role.TEACHER:
            if await self.user_repo.count_by_role(school.id, Role.TEACHER) >= school.max_teachers:
                raise ValidationError("Teacher limit reached")
        elif role is Role.STUDENT:
            if await self.user_repo.count_by_role(school.id, Role.STUDENT) >= school.max_students:
                raise ValidationError("Student limit reached")

        try:
            user = await self._insert_member(school, member, role)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User created",
            user_id=user.id,
            role=role.value,
            school_id=school.id,
            created_by=claims.account_id,
        )
        return user

    async def bulk_create_students(
        self,
        claims: SessionClaims,
        rows: list[dict[str, Any]],
        school_id: str | None = None,
    ) -> BulkCreateResult:
        """Import students, reporting success or failure per row.

        Capacity for the whole batch is checked before anything is inserted.
        Each row is inserted in its own savepoint, so one bad row never undoes
        the others.

        Raises:
            ValidationError: No rows, or the batch would exceed capacity.
            NotFoundError: If the school does not exist.
        """
        target_school_id = resolve_school_id(claims, school_id)
        if not rows:
            raise ValidationError("No students provided")

        school = await self._load_school(target_school_id)
        current = await self.user_repo.count_by_role(school.id, Role.STUDENT)
        if current + len(rows) > school.max_students:
            raise ValidationError(
                f"Cannot add {len(rows)} students. Limit reached. "
                f"Remaining slots: {school.max_students - current}"
            )

        result = BulkCreateResult(total=len(rows))
        for row in rows:
            email = row.get("email")
            if any(not row.get(key) for key in BULK_REQUIRED_FIELDS):
                result.errors.append({"email": email, "error": "Missing required fields"})
                continue
            member = NewMember(
                email=email,
                password=row["password"],
                role=Role.STUDENT.value,
                first_name=row["first_name"],
                last_name=row["last_name"],
                student_class=row["student_class"],
                phone=row.get("phone"),
                address=row.get("address"),
            )
            try:
                user = await self._insert_member(school, member, Role.STUDENT)
            except ConflictError as e:
                result.errors.append({"email": email, "error": e.message})
                continue
            except SchoolBaseError as e:
                logger.error("Bulk student row failed", email=email, error=e.message)
                result.errors.append({"email": email, "error": "Failed to create"})
                continue
            result.created.append({"email": email, "studentId": user.student_id})

        await self.session.commit()
        logger.info(
            "Bulk student import finished",
            school_id=school.id,
            success_count=len(result.created),
            failure_count=len(result.errors),
        )
        return result

    async def update_user(
        self,
        claims: SessionClaims,
        user_id: str,
        changes: dict[str, Any],
    ) -> UserModel:
        """Update profile fields of a school member.

        Only the keys in ``UPDATABLE_FIELDS`` are applied.

        Raises:
            NotFoundError: If the user does not exist.
            ForbiddenError: If an ADMIN targets another school's user.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        ensure_tenant_scope(claims, user.school_id, "Forbidden: User belongs to another school")

        for key in UPDATABLE_FIELDS:
            if key in changes:
                setattr(user, key, changes[key])
        await self.user_repo.update(user)
        await self.session.commit()
        logger.info("User updated", user_id=user.id, updated_by=claims.account_id)
        return user

    async def list_users(
        self,
        claims: SessionClaims,
        role: str,
        school_id: str | None = None,
    ) -> list[UserModel]:
        """List a school's accounts with ``role``.

        Raises:
            ValidationError: If ``role`` is not ADMIN, TEACHER or STUDENT.
            NotFoundError: If the school does not exist.
        """
        target_school_id = resolve_school_id(claims, school_id)
        try:
            parsed = Role(role)
        except ValueError:
            raise ValidationError("Invalid role") from None
        if parsed not in SCHOOL_MEMBER_ROLES:
            raise ValidationError("Invalid role")
        school = await self._load_school(target_school_id)
        return await self.user_repo.list_by_school_and_role(school.id, parsed)

    async def stats(self, claims: SessionClaims) -> dict[str, int]:
        """Teacher and student head counts for the caller's school."""
        school_id = resolve_school_id(claims, None)
        return {
            "teacherCount": await self.user_repo.count_by_role(school_id, Role.TEACHER),
            "studentCount": await self.user_repo.count_by_role(school_id, Role.STUDENT),
        }

    async def backfill_student_ids(self) -> list[tuple[UserModel, str]]:
        """Allocate student IDs for students that were created without one.

        Returns:
            (student, assigned_id) pairs.
        """
        assigned: list[tuple[UserModel, str]] = []
        for student in await self.user_repo.list_students_without_student_id():
            school = await self._load_school(student.school_id)

            async def assign(student_id: str, student: UserModel = student) -> str:
                try:
                    async with self.session.begin_nested():
                        student.student_id = student_id
                        await self.user_repo.update(student)
                except ConflictError:
                    # rolled-back savepoint expires the row
                    await self.session.refresh(student)
                    raise
                return student_id

            student_id = await self.allocator.insert_with_retry(
                lambda: self.allocator.allocate_student_id(school.school_number),
                assign,
                STUDENT_ID_FIELD,
            )
            assigned.append((student, student_id))
        await self.session.commit()
        logger.info("Student IDs backfilled", count=len(assigned))
        return assigned

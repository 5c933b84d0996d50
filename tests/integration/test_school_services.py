"""Integration tests for school and membership services against SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from factories import PASSWORD, admin_claims, create_member, create_school
from schoolbase.core.exceptions import ConflictError, NotFoundError, ValidationError
from schoolbase.domain.entities import Role, SessionClaims, add_months, ensure_utc
from schoolbase.domain.services import (
    CreateSchoolCommand,
    ExamScheduleService,
    IdentifierAllocator,
    NewMember,
    SchoolService,
    SubjectService,
    UserService,
)
from schoolbase.domain.services.catalogue_service import STANDARD_SUBJECTS
from schoolbase.infrastructure.auth import hash_password
from schoolbase.infrastructure.persistence.models import (
    ExamScheduleModel,
    SchoolModel,
    UserModel,
)


class ScriptedRandom:
    """Random source returning a fixed sequence of integers."""

    def __init__(self, *values: int) -> None:
        self.values = list(values)

    def randint(self, a: int, b: int) -> int:
        return self.values.pop(0)


class BlindIndex:
    """Index that never sees existing rows, as with a concurrent writer."""

    async def school_number_exists(self, school_number: str) -> bool:
        return False

    async def student_id_exists(self, student_id: str) -> bool:
        return False


def command(name: str, admin_email: str, **kwargs) -> CreateSchoolCommand:
    return CreateSchoolCommand(
        name=name, admin_email=admin_email, admin_password=PASSWORD, **kwargs
    )


class TestSchoolService:
    @pytest.mark.asyncio
    async def test_create_school_allocates_number_and_admin(self, db_session):
        now = datetime(2026, 10, 18, tzinfo=timezone.utc)
        service = SchoolService(db_session, clock=lambda: now)

        school, admin = await service.create_school(command("Hillside", "head@hillside.test"))

        assert IdentifierAllocator.validate_school_number(school.school_number)
        assert ensure_utc(school.valid_until) == add_months(now, 4)
        assert school.max_students == 100
        assert school.max_teachers == 10
        assert admin.role == Role.ADMIN.value
        assert admin.school_id == school.id

    @pytest.mark.asyncio
    async def test_school_number_collision_on_insert_is_retried(self, db_session):
        first = SchoolService(
            db_session, allocator=IdentifierAllocator(BlindIndex(), rng=ScriptedRandom(482913))
        )
        await first.create_school(command("First", "a@first.test"))

        second = SchoolService(
            db_session,
            allocator=IdentifierAllocator(BlindIndex(), rng=ScriptedRandom(482913, 573920)),
        )
        school, _ = await second.create_school(command("Second", "a@second.test"))

        assert school.school_number == "573920"

    @pytest.mark.asyncio
    async def test_admin_email_conflict_rolls_back_school(self, db_session):
        service = SchoolService(db_session)
        await service.create_school(command("First", "taken@school.test"))

        with pytest.raises(ConflictError):
            await service.create_school(command("Second", "taken@school.test"))

        count = await db_session.scalar(select(func.count(SchoolModel.id)))
        assert count == 1

    @pytest.mark.asyncio
    async def test_missing_admin_credentials(self, db_session):
        with pytest.raises(ValidationError, match="Admin email and password are required"):
            await SchoolService(db_session).create_school(
                CreateSchoolCommand(name="X", admin_email="", admin_password="")
            )

    @pytest.mark.asyncio
    async def test_reactivate_extends_from_now(self, db_session):
        school = await create_school(db_session)
        now = datetime(2027, 6, 1, tzinfo=timezone.utc)

        reactivated = await SchoolService(db_session, clock=lambda: now).reactivate_school(
            school["id"]
        )

        assert ensure_utc(reactivated.valid_until) == add_months(now, 4)
        assert ensure_utc(reactivated.last_reactivated_at) == now

    @pytest.mark.asyncio
    async def test_delete_school_removes_members_and_exams(self, db_session):
        school = await create_school(db_session)
        await create_member(db_session, school, Role.TEACHER, "t@greenfield.test")
        await ExamScheduleService(db_session).create_exam(
            school["id"], "Mathematics", "JSS1", datetime(2026, 11, 2).date()
        )

        await SchoolService(db_session).delete_school(school["id"])

        assert await db_session.scalar(select(func.count(UserModel.id))) == 0
        assert await db_session.scalar(select(func.count(ExamScheduleModel.id))) == 0
        with pytest.raises(NotFoundError):
            await SchoolService(db_session).get_school(school["id"])

    @pytest.mark.asyncio
    async def test_validity_report(self, db_session):
        await create_school(db_session)
        now = datetime.now(timezone.utc) + timedelta(days=365)

        report = await SchoolService(db_session, clock=lambda: now).validity_report()

        assert len(report) == 1
        assert report[0].expired is True
        assert report[0].days_remaining < 0


class TestUserService:
    @pytest.mark.asyncio
    async def test_student_gets_id_under_school_number(self, db_session, school):
        student = await create_member(
            db_session, school, Role.STUDENT, "kid@greenfield.test", student_class="JSS1"
        )

        assert IdentifierAllocator.validate_student_id(
            student["student_id"], school["school_number"]
        )

    @pytest.mark.asyncio
    async def test_teacher_has_no_student_id(self, db_session, school):
        teacher = await create_member(db_session, school, Role.TEACHER, "t@greenfield.test")
        assert teacher["student_id"] is None

    @pytest.mark.asyncio
    async def test_student_id_collision_on_insert_is_retried(self, db_session):
        school = await create_school(db_session)
        claims = admin_claims(school)

        def service(*suffixes: int) -> UserService:
            return UserService(
                db_session,
                allocator=IdentifierAllocator(BlindIndex(), rng=ScriptedRandom(*suffixes)),
            )

        await service(1234).create_user(
            claims, NewMember(email="one@x.test", password=PASSWORD, role="STUDENT")
        )
        second = await service(1234, 5678).create_user(
            claims, NewMember(email="two@x.test", password=PASSWORD, role="STUDENT")
        )

        assert second.student_id == f"{school['school_number']}5678"

    @pytest.mark.asyncio
    async def test_capacity_limits(self, db_session):
        school = await create_school(db_session, max_teachers=1, max_students=1)
        await create_member(db_session, school, Role.TEACHER, "t1@x.test")
        await create_member(db_session, school, Role.STUDENT, "s1@x.test")

        with pytest.raises(ValidationError, match="Teacher limit reached"):
            await create_member(db_session, school, Role.TEACHER, "t2@x.test")
        with pytest.raises(ValidationError, match="Student limit reached"):
            await create_member(db_session, school, Role.STUDENT, "s2@x.test")

    @pytest.mark.asyncio
    async def test_superadmin_role_cannot_be_created_in_school(self, db_session, school):
        with pytest.raises(ValidationError, match="Invalid role"):
            await create_member(db_session, school, Role.SUPERADMIN, "sa@x.test")

    @pytest.mark.asyncio
    async def test_superadmin_must_name_school(self, db_session):
        claims = SessionClaims(account_id="sa", role=Role.SUPERADMIN)

        with pytest.raises(ValidationError, match="School ID is required"):
            await UserService(db_session).create_user(
                claims, NewMember(email="t@x.test", password=PASSWORD, role="TEACHER")
            )

    @pytest.mark.asyncio
    async def test_bulk_reports_each_row(self, db_session, school):
        rows = [
            {"email": "a@x.test", "password": "p", "first_name": "A", "last_name": "One", "student_class": "SS1"},
            {"email": "b@x.test", "password": "p", "first_name": "B", "last_name": "Two", "student_class": "SS1"},
            {"email": "c@x.test", "password": "p", "first_name": "C", "last_name": "Three"},
            {"email": "a@x.test", "password": "p", "first_name": "D", "last_name": "Four", "student_class": "SS2"},
        ]

        result = await UserService(db_session).bulk_create_students(admin_claims(school), rows)

        assert result.message == "Processed 4 students"
        assert [item["email"] for item in result.created] == ["a@x.test", "b@x.test"]
        assert result.errors == [
            {"email": "c@x.test", "error": "Missing required fields"},
            {"email": "a@x.test", "error": "Email already exists"},
        ]
        for item in result.created:
            assert item["studentId"].startswith(school["school_number"])

    @pytest.mark.asyncio
    async def test_bulk_capacity_is_checked_up_front(self, db_session):
        school = await create_school(db_session, max_students=3)
        await create_member(db_session, school, Role.STUDENT, "s1@x.test")
        rows = [{"email": f"n{i}@x.test"} for i in range(3)]

        with pytest.raises(ValidationError) as exc_info:
            await UserService(db_session).bulk_create_students(admin_claims(school), rows)

        assert exc_info.value.message == "Cannot add 3 students. Limit reached. Remaining slots: 2"

    @pytest.mark.asyncio
    async def test_backfill_assigns_missing_student_ids(self, db_session, school):
        db_session.add(
            UserModel(
                email="legacy@x.test",
                password_hash=hash_password(PASSWORD),
                role=Role.STUDENT.value,
                school_id=school["id"],
            )
        )
        await db_session.commit()

        assigned = await UserService(db_session).backfill_student_ids()

        assert len(assigned) == 1
        student, student_id = assigned[0]
        assert student.student_id == student_id
        assert IdentifierAllocator.validate_student_id(student_id, school["school_number"])
        assert await UserService(db_session).backfill_student_ids() == []


class TestCatalogue:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_session):
        created, skipped = await SubjectService(db_session).seed_standard_subjects()
        assert (created, skipped) == (len(STANDARD_SUBJECTS), 0)

        created, skipped = await SubjectService(db_session).seed_standard_subjects()
        assert (created, skipped) == (0, len(STANDARD_SUBJECTS))

    @pytest.mark.asyncio
    async def test_same_name_in_different_sections(self, db_session):
        service = SubjectService(db_session)
        await service.create_subject("Physics", "senior")
        await service.create_subject("Physics", "JUNIOR")

        with pytest.raises(ConflictError, match="Subject already exists in this section"):
            await service.create_subject("Physics", "SENIOR")

    @pytest.mark.asyncio
    async def test_exam_of_other_school_is_not_found(self, db_session):
        school_a = await create_school(db_session, name="A", admin_email="a@a.test")
        school_b = await create_school(db_session, name="B", admin_email="b@b.test")
        service = ExamScheduleService(db_session)
        exam = await service.create_exam(
            school_a["id"], "Biology", "SS2", datetime(2026, 12, 1).date(), time="09:00"
        )

        with pytest.raises(NotFoundError, match="Exam schedule not found"):
            await service.update_exam(school_b["id"], exam.id, {"time": "10:00"})
        with pytest.raises(NotFoundError):
            await service.delete_exam(school_b["id"], exam.id)
        assert await service.list_exams(school_b["id"]) == []

    @pytest.mark.asyncio
    async def test_exams_of_unknown_school(self, db_session):
        service = ExamScheduleService(db_session)

        with pytest.raises(NotFoundError, match="School not found"):
            await service.create_exam("no-such-school", "Biology", "SS2", datetime(2026, 12, 1).date())
        with pytest.raises(NotFoundError, match="School not found"):
            await service.list_exams("no-such-school")
        assert await db_session.scalar(select(func.count(ExamScheduleModel.id))) == 0

    @pytest.mark.asyncio
    async def test_exam_update_cannot_clear_date(self, db_session):
        school = await create_school(db_session)
        service = ExamScheduleService(db_session)
        exam = await service.create_exam(
            school["id"], "Biology", "SS2", datetime(2026, 12, 1).date()
        )

        with pytest.raises(ValidationError, match="Date cannot be empty"):
            await service.update_exam(school["id"], exam.id, {"exam_date": None, "time": "10:00"})
        assert exam.time is None

    @pytest.mark.asyncio
    async def test_list_users_of_unknown_school(self, db_session):
        superadmin = SessionClaims(account_id="root", role=Role.SUPERADMIN)

        with pytest.raises(NotFoundError, match="School not found"):
            await UserService(db_session).list_users(superadmin, "TEACHER", "no-such-school")

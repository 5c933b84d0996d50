"""Subject catalogue and exam schedules."""

from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.exceptions import NotFoundError, ValidationError
from schoolbase.core.logging import get_logger
from schoolbase.infrastructure.persistence.models import (
    ExamScheduleModel,
    SchoolModel,
    SubjectModel,
)
from schoolbase.infrastructure.persistence.repositories import (
    ExamScheduleRepository,
    SchoolRepository,
    SubjectRepository,
)

logger = get_logger(__name__)

DEFAULT_CATEGORY = "General"

# (name, section, category)
STANDARD_SUBJECTS: tuple[tuple[str, str, str], ...] = (
    ("English Language Studies", "JUNIOR", "General"),
    ("Mathematics", "JUNIOR", "General"),
    ("Basic Science", "JUNIOR", "Science"),
    ("Basic Technology", "JUNIOR", "Technology"),
    ("Social Studies", "JUNIOR", "Humanities"),
    ("Civic Education", "JUNIOR", "Humanities"),
    ("Business Studies", "JUNIOR", "Business"),
    ("Agricultural Science", "JUNIOR", "Vocational"),
    ("Cultural and Creative Arts (CCA)", "JUNIOR", "Arts"),
    ("Physical and Health Education", "JUNIOR", "Vocational"),
    ("Religion and National Values (CRK/IRS)", "JUNIOR", "Humanities"),
    ("Computer Studies/ICT/Digital Technology", "JUNIOR", "Technology"),
    ("Nigerian Languages (Hausa, Igbo, or Yoruba)", "JUNIOR", "Languages"),
    ("Home Economics", "JUNIOR", "Vocational"),
    ("French Language (Optional)", "JUNIOR", "Languages"),
    ("Security Education", "JUNIOR", "General"),
    ("English Language", "SENIOR", "Compulsory"),
    ("General Mathematics", "SENIOR", "Compulsory"),
    ("Citizenship and Heritage Studies", "SENIOR", "Compulsory"),
    ("Digital Technologies", "SENIOR", "Compulsory"),
    ("One Trade/Entrepreneurship Subject", "SENIOR", "Compulsory"),
    ("Biology", "SENIOR", "Science"),
    ("Chemistry", "SENIOR", "Science"),
    ("Physics", "SENIOR", "Science"),
    ("Agricultural Science", "SENIOR", "Science"),
    ("Further Mathematics", "SENIOR", "Science"),
    ("Physical Education", "SENIOR", "Science"),
    ("Health Education", "SENIOR", "Science"),
    ("Food & Nutrition", "SENIOR", "Science"),
    ("Geography", "SENIOR", "Science"),
    ("Technical Drawing", "SENIOR", "Science"),
    ("Nigerian History", "SENIOR", "Arts"),
    ("Government", "SENIOR", "Arts"),
    ("Christian Religious Studies", "SENIOR", "Arts"),
    ("Islamic Studies", "SENIOR", "Arts"),
    ("One Nigerian Language", "SENIOR", "Arts"),
    ("French", "SENIOR", "Arts"),
    ("Arabic", "SENIOR", "Arts"),
    ("Visual Arts", "SENIOR", "Arts"),
    ("Music", "SENIOR", "Arts"),
    ("Literature in English", "SENIOR", "Arts"),
    ("Home Management", "SENIOR", "Arts"),
    ("Catering Craft", "SENIOR", "Arts"),
    ("Accounting", "SENIOR", "Commercial"),
    ("Commerce", "SENIOR", "Commercial"),
    ("Marketing", "SENIOR", "Commercial"),
    ("Economics", "SENIOR", "Commercial"),
    ("Solar PV Installation and Maintenance", "SENIOR", "Trade"),
    ("Fashion Design and Garment Making", "SENIOR", "Trade"),
    ("Livestock Farming", "SENIOR", "Trade"),
    ("Beauty and Cosmetology", "SENIOR", "Trade"),
    ("Computer Hardware and GSM Repairs", "SENIOR", "Trade"),
    ("Horticulture and Crop Production", "SENIOR", "Trade"),
)

EXAM_FIELDS = ("subject", "student_class", "exam_date", "time", "duration", "type")
# Attribute -> request key for the fields a schedule cannot do without.
REQUIRED_EXAM_FIELDS = {"subject": "subject", "student_class": "class", "exam_date": "date"}


class SubjectService:
    """Global subject catalogue, unique by name within a section."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.subject_repo = SubjectRepository(session)

    async def list_subjects(self) -> list[SubjectModel]:
        return await self.subject_repo.list_all()

    async def create_subject(
        self,
        name: str | None,
        section: str | None,
        category: str | None = None,
    ) -> SubjectModel:
        """Add a subject. The section is stored upper-case.

        Raises:
            ValidationError: If name or section is missing.
            ConflictError: If the name already exists in the section.
        """
        if not name or not section:
            raise ValidationError("Name and Section are required")
        subject = SubjectModel(
            name=name,
            section=section.upper(),
            category=category or DEFAULT_CATEGORY,
        )
        await self.subject_repo.create(subject)
        await self.session.commit()
        logger.info("Subject created", subject_id=subject.id, section=subject.section)
        return subject

    async def delete_subject(self, subject_id: str) -> None:
        subject = await self.subject_repo.get_by_id(subject_id)
        if subject is None:
            raise NotFoundError("Subject not found")
        await self.subject_repo.delete(subject)
        await self.session.commit()
        logger.info("Subject deleted", subject_id=subject_id)

    async def seed_standard_subjects(self) -> tuple[int, int]:
        """Insert the standard catalogue, skipping entries that already exist.

        Returns:
            (created, skipped) counts.
        """
        created = skipped = 0
        for name, section, category in STANDARD_SUBJECTS:
            if await self.subject_repo.get_by_name_and_section(name, section) is not None:
                skipped += 1
                continue
            await self.subject_repo.create(
                SubjectModel(name=name, section=section, category=category)
            )
            created += 1
        await self.session.commit()
        logger.info("Subject catalogue seeded", created=created, skipped=skipped)
        return created, skipped


class ExamScheduleService:
    """Exam schedules of one school.

    A schedule belonging to another school is reported as not found rather
    than forbidden so its existence is not revealed.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.exam_repo = ExamScheduleRepository(session)
        self.school_repo = SchoolRepository(session)

    async def _load_school(self, school_id: str) -> SchoolModel:
        school = await self.school_repo.get_by_id(school_id)
        if school is None:
            raise NotFoundError("School not found")
        return school

    async def _get_in_school(self, school_id: str, exam_id: str) -> ExamScheduleModel:
        exam = await self.exam_repo.get_by_id(exam_id)
        if exam is None or exam.school_id != school_id:
            raise NotFoundError("Exam schedule not found")
        return exam

    async def list_exams(self, school_id: str) -> list[ExamScheduleModel]:
        await self._load_school(school_id)
        return await self.exam_repo.list_by_school(school_id)

    async def create_exam(
        self,
        school_id: str,
        subject: str,
        student_class: str,
        exam_date: date,
        time: str | None = None,
        duration: str | None = None,
        type: str | None = None,
    ) -> ExamScheduleModel:
        """Add a schedule to a school.

        Raises:
            NotFoundError: If the school does not exist.
        """
        await self._load_school(school_id)
        exam = ExamScheduleModel(
            school_id=school_id,
            subject=subject,
            student_class=student_class,
            exam_date=exam_date,
            time=time,
            duration=duration,
            type=type,
        )
        await self.exam_repo.create(exam)
        await self.session.commit()
        logger.info("Exam schedule created", exam_id=exam.id, school_id=school_id)
        return exam

    async def update_exam(
        self,
        school_id: str,
        exam_id: str,
        changes: dict[str, Any],
    ) -> ExamScheduleModel:
        """Apply ``changes`` (keys from ``EXAM_FIELDS``) to a schedule.

        Raises:
            NotFoundError: If the schedule is missing or belongs to another school.
            ValidationError: If subject, class or date is cleared.
        """
        for key, label in REQUIRED_EXAM_FIELDS.items():
            if key in changes and changes[key] is None:
                raise ValidationError(f"{label.capitalize()} cannot be empty")
        exam = await self._get_in_school(school_id, exam_id)
        for key in EXAM_FIELDS:
            if key in changes:
                setattr(exam, key, changes[key])
        await self.exam_repo.update(exam)
        await self.session.commit()
        return exam

    async def delete_exam(self, school_id: str, exam_id: str) -> None:
        exam = await self._get_in_school(school_id, exam_id)
        await self.exam_repo.delete(exam)
        await self.session.commit()
        logger.info("Exam schedule deleted", exam_id=exam_id, school_id=school_id)

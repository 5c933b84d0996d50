"""SQLAlchemy model for exam schedules."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.domain.entities import utc_now
from schoolbase.infrastructure.persistence.database import Base


class ExamScheduleModel(Base):
    """A scheduled exam, visible only inside its school."""

    __tablename__ = "exam_schedules"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    school_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    # "class" is reserved in Python
    student_class: Mapped[str] = mapped_column("class", String(50), nullable=False)
    exam_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        return f"<ExamSchedule(subject={self.subject}, class={self.student_class}, date={self.exam_date})>"

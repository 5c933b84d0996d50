"""SQLAlchemy model for the subjects catalogue."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.domain.entities import utc_now
from schoolbase.infrastructure.persistence.database import Base


class SubjectModel(Base):
    """A subject offered in a section (JUNIOR or SENIOR).

    The same name may appear once per section.
    """

    __tablename__ = "subjects"
    __table_args__ = (
        UniqueConstraint("name", "section", name="uq_subjects_name_section"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Subject(name={self.name}, section={self.section})>"

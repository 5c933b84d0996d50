"""SQLAlchemy model for the schools table.

A school is a tenant. Its ``school_number`` is the 6-digit public identifier
allocated at creation and never changed afterwards.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolbase.domain.entities import utc_now
from schoolbase.infrastructure.persistence.database import Base


class SchoolModel(Base):
    """SQLAlchemy model for the schools table.

    Attributes:
        id: Primary key (UUID string).
        school_number: Globally unique 6-digit number (e.g., 482913).
        name: Display name.
        max_students: Capacity for STUDENT accounts.
        max_teachers: Capacity for TEACHER accounts.
        valid_until: Members cannot log in after this moment.
        last_reactivated_at: When validity was last extended, if ever.
    """

    __tablename__ = "schools"
    __table_args__ = (
        UniqueConstraint("school_number", name="uq_schools_school_number"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="School ID (UUID)",
    )
    school_number: Mapped[str] = mapped_column(
        String(6),
        nullable=False,
        comment="Public 6-digit school number",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    max_students: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    max_teachers: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    valid_until: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Members are refused access after this moment",
    )
    last_reactivated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
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

    users: Mapped[list["UserModel"]] = relationship(  # noqa: F821
        "UserModel",
        back_populates="school",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, school_number={self.school_number}, name={self.name})>"

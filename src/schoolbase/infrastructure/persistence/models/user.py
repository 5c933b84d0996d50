"""SQLAlchemy model for the users table.

Holds every account regardless of role. SUPERADMIN rows have no school;
all other roles belong to exactly one school and are removed with it.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolbase.domain.entities import utc_now
from schoolbase.infrastructure.persistence.database import Base


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (UUID string).
        email: Globally unique email address, case-sensitive as stored.
        password_hash: Argon2 hash.
        role: SUPERADMIN, ADMIN, TEACHER or STUDENT.
        school_id: Owning school (None only for SUPERADMIN).
        student_id: Login identifier of STUDENT accounts.
        is_active: Inactive accounts never authenticate.
        is_email_verified: Meaningful for SUPERADMIN only.
        verification_code: One-time email verification code.
        two_factor_code: One-time login code.
        two_factor_expires: Moment the login code stops being accepted.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("student_id", name="uq_users_student_id"),
        Index("ix_users_school_id_role", "school_id", "role"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="User ID (UUID)",
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    school_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=True,
        comment="Foreign key to schools table",
    )
    student_id: Mapped[str | None] = mapped_column(
        String(10),
        nullable=True,
        comment="School number followed by 4 digits",
    )
    student_class: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subjects: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verification_code: Mapped[str | None] = mapped_column(String(6), nullable=True)
    two_factor_code: Mapped[str | None] = mapped_column(String(6), nullable=True)
    two_factor_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_login: Mapped[datetime | None] = mapped_column(
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

    school: Mapped["SchoolModel | None"] = relationship(  # noqa: F821
        "SchoolModel",
        back_populates="users",
        lazy="joined",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

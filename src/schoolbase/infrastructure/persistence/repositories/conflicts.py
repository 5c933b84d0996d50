"""Translation of unique-constraint violations into ConflictError."""

import re
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.exceptions import ConflictError
from schoolbase.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")

CONSTRAINT_FIELDS = {
    "uq_schools_school_number": "school_number",
    "uq_users_email": "email",
    "uq_users_student_id": "student_id",
    "uq_subjects_name_section": "name",
}

CONFLICT_MESSAGES = {
    "school_number": "School Number already exists",
    "email": "Email already exists",
    "student_id": "Student ID already exists",
    "name": "Subject already exists in this section",
}

# SQLite: "UNIQUE constraint failed: users.email"
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")
# PostgreSQL: "Key (email)=(a@b.c) already exists."
_POSTGRES_KEY = re.compile(r"Key \((\w+)")


def conflict_field(error: IntegrityError) -> str | None:
    """Return the unique field an IntegrityError was raised for, if any."""
    message = str(error.orig)
    for constraint, field in CONSTRAINT_FIELDS.items():
        if constraint in message:
            return field
    match = _SQLITE_UNIQUE.search(message) or _POSTGRES_KEY.search(message)
    return match.group(1) if match else None


async def insert_or_conflict(session: AsyncSession, instance: ModelT) -> ModelT:
    """Insert ``instance`` inside a SAVEPOINT.

    A unique-constraint rejection rolls back to the savepoint only, so the
    caller's transaction stays usable (e.g. to retry with a new identifier).

    Raises:
        ConflictError: If a unique constraint rejected the row.
        IntegrityError: For any other integrity failure.
    """
    try:
        async with session.begin_nested():
            session.add(instance)
            await session.flush()
    except IntegrityError as e:
        field = conflict_field(e)
        if field is None:
            raise
        logger.info("Unique constraint rejected insert", field=field)
        raise ConflictError(CONFLICT_MESSAGES.get(field), field=field) from e
    return instance


async def flush_or_conflict(session: AsyncSession) -> None:
    """Flush pending updates, translating unique violations.

    Raises:
        ConflictError: If a unique constraint rejected the update.
    """
    try:
        await session.flush()
    except IntegrityError as e:
        field = conflict_field(e)
        if field is None:
            raise
        raise ConflictError(CONFLICT_MESSAGES.get(field), field=field) from e

"""Repositories for database operations.

Repositories wrap an AsyncSession and never commit; the calling service
owns the transaction.
"""

from schoolbase.infrastructure.persistence.repositories.conflicts import (
    conflict_field,
    insert_or_conflict,
)
from schoolbase.infrastructure.persistence.repositories.exam_schedule_repository import (
    ExamScheduleRepository,
)
from schoolbase.infrastructure.persistence.repositories.school_repository import (
    SchoolRepository,
)
from schoolbase.infrastructure.persistence.repositories.subject_repository import (
    SubjectRepository,
)
from schoolbase.infrastructure.persistence.repositories.uniqueness_index import (
    StoreUniquenessIndex,
)
from schoolbase.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "ExamScheduleRepository",
    "SchoolRepository",
    "StoreUniquenessIndex",
    "SubjectRepository",
    "UserRepository",
    "conflict_field",
    "insert_or_conflict",
]

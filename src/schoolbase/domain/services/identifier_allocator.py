"""Identifier allocator for school numbers and student IDs.

School numbers are 6-digit numeric strings. Student IDs are the school number
followed by 4 random digits. Candidates are drawn at random and checked
against the persisted uniqueness index before use; the check is advisory only,
the unique constraints in the store are the final authority. Callers insert
through :meth:`IdentifierAllocator.insert_with_retry` so that a constraint
rejection triggers a fresh allocation instead of a failure.
"""

import random
import re
from typing import Awaitable, Callable, Protocol, TypeVar

from schoolbase.core.exceptions import AllocationExhaustedError, ConflictError
from schoolbase.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

SCHOOL_NUMBER_FIELD = "school_number"
STUDENT_ID_FIELD = "student_id"


class UniquenessIndex(Protocol):
    """Read side of the store's unique indexes."""

    async def school_number_exists(self, school_number: str) -> bool: ...

    async def student_id_exists(self, student_id: str) -> bool: ...


class IdentifierAllocator:
    """Allocates collision-free human-readable identifiers.

    Capacity is 900,000 school numbers (100000-999999) and 9,000 student IDs
    per school (suffix 1000-9999). Leading zeros are never produced so the
    identifiers survive being treated as numbers by spreadsheets.
    """

    SCHOOL_NUMBER_PATTERN = re.compile(r"^[1-9]\d{5}$")
    STUDENT_SUFFIX_PATTERN = re.compile(r"^[1-9]\d{3}$")

    def __init__(
        self,
        index: UniquenessIndex,
        max_attempts: int = 50,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the allocator.

        Args:
            index: Store-backed uniqueness probes.
            max_attempts: Candidates tried before giving up.
            rng: Random source; defaults to the OS entropy pool.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.index = index
        self.max_attempts = max_attempts
        self.rng = rng or random.SystemRandom()

    @classmethod
    def validate_school_number(cls, school_number: str) -> bool:
        """Check that a school number is exactly 6 digits.

        Examples:
            >>> IdentifierAllocator.validate_school_number("482913")
            True
            >>> IdentifierAllocator.validate_school_number("48291")
            False
        """
        if not isinstance(school_number, str):
            return False
        return bool(cls.SCHOOL_NUMBER_PATTERN.match(school_number))

    @classmethod
    def validate_student_id(cls, student_id: str, school_number: str) -> bool:
        """Check that a student ID is ``school_number`` plus 4 digits.

        Examples:
            >>> IdentifierAllocator.validate_student_id("4829137351", "482913")
            True
            >>> IdentifierAllocator.validate_student_id("1111117351", "482913")
            False
        """
        if not isinstance(student_id, str) or not student_id.startswith(school_number):
            return False
        return bool(cls.STUDENT_SUFFIX_PATTERN.match(student_id[len(school_number):]))

    def candidate_school_number(self) -> str:
        return str(self.rng.randint(100000, 999999))

    def candidate_student_id(self, school_number: str) -> str:
        return f"{school_number}{self.rng.randint(1000, 9999)}"

    async def allocate_school_number(self) -> str:
        """Return a school number not present in the index.

        Raises:
            AllocationExhaustedError: If every candidate tried was taken.
        """
        return await self._allocate(
            SCHOOL_NUMBER_FIELD,
            self.candidate_school_number,
            self.index.school_number_exists,
        )

    async def allocate_student_id(self, school_number: str) -> str:
        """Return a student ID under ``school_number`` not present in the index.

        Raises:
            ValueError: If ``school_number`` is malformed.
            AllocationExhaustedError: If every candidate tried was taken.
        """
        if not self.validate_school_number(school_number):
            raise ValueError(f"Invalid school number: {school_number!r}")
        return await self._allocate(
            STUDENT_ID_FIELD,
            lambda: self.candidate_student_id(school_number),
            self.index.student_id_exists,
        )

    async def insert_with_retry(
        self,
        allocate: Callable[[], Awaitable[str]],
        insert: Callable[[str], Awaitable[T]],
        field: str,
    ) -> T:
        """Allocate an identifier and insert with it, retrying on collisions.

        A :class:`ConflictError` on ``field`` means another writer claimed the
        same candidate between the check and the insert; allocation restarts
        from scratch. Conflicts on any other field propagate unchanged.

        Args:
            allocate: Produces a fresh candidate (one of the ``allocate_*`` methods).
            insert: Persists the record using the candidate.
            field: Name of the unique field the candidate fills.

        Returns:
            Whatever ``insert`` returns.

        Raises:
            AllocationExhaustedError: If every attempt collided.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = await allocate()
            try:
                return await insert(candidate)
            except ConflictError as e:
                if e.field != field:
                    raise
                logger.warning(
                    "Identifier collided on insert, retrying",
                    field=field,
                    attempt=attempt,
                )
        raise AllocationExhaustedError(field.replace("_", " "), self.max_attempts)

    async def _allocate(
        self,
        field: str,
        candidate: Callable[[], str],
        exists: Callable[[str], Awaitable[bool]],
    ) -> str:
        for _ in range(self.max_attempts):
            value = candidate()
            if not await exists(value):
                return value
        logger.error("Identifier space exhausted", field=field, attempts=self.max_attempts)
        raise AllocationExhaustedError(field.replace("_", " "), self.max_attempts)

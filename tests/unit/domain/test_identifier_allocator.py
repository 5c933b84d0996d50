"""Unit tests for IdentifierAllocator.

Covers:
- School number and student ID format validation
- Uniqueness against the index
- Exhaustion when every candidate is taken
- Retry when an insert collides on the allocated field
"""

import random

import pytest

from schoolbase.core.exceptions import AllocationExhaustedError, ConflictError
from schoolbase.domain.services.identifier_allocator import (
    SCHOOL_NUMBER_FIELD,
    STUDENT_ID_FIELD,
    IdentifierAllocator,
)


class FakeIndex:
    """In-memory uniqueness index."""

    def __init__(self, school_numbers=(), student_ids=()):
        self.school_numbers = set(school_numbers)
        self.student_ids = set(student_ids)

    async def school_number_exists(self, school_number: str) -> bool:
        return school_number in self.school_numbers

    async def student_id_exists(self, student_id: str) -> bool:
        return student_id in self.student_ids


class FullIndex:
    async def school_number_exists(self, school_number: str) -> bool:
        return True

    async def student_id_exists(self, student_id: str) -> bool:
        return True


class TestValidation:
    """Test identifier format validation."""

    def test_validate_valid_school_numbers(self):
        for school_number in ["100000", "482913", "999999"]:
            assert IdentifierAllocator.validate_school_number(school_number) is True

    def test_validate_invalid_school_numbers(self):
        invalid = [
            "48291",  # Too short
            "4829130",  # Too long
            "012345",  # Leading zero
            "48a913",
            "",
            482913,
        ]
        for school_number in invalid:
            assert IdentifierAllocator.validate_school_number(school_number) is False

    def test_validate_student_id(self):
        assert IdentifierAllocator.validate_student_id("4829137351", "482913") is True
        assert IdentifierAllocator.validate_student_id("4829130351", "482913") is False
        assert IdentifierAllocator.validate_student_id("482913735", "482913") is False
        assert IdentifierAllocator.validate_student_id("1111117351", "482913") is False


class TestAllocation:
    """Test allocation against the uniqueness index."""

    @pytest.mark.asyncio
    async def test_allocates_ten_thousand_unique_school_numbers(self):
        index = FakeIndex()
        allocator = IdentifierAllocator(index, rng=random.Random(7))

        for _ in range(10_000):
            school_number = await allocator.allocate_school_number()
            assert IdentifierAllocator.validate_school_number(school_number)
            assert school_number not in index.school_numbers
            index.school_numbers.add(school_number)

        assert len(index.school_numbers) == 10_000

    @pytest.mark.asyncio
    async def test_student_id_extends_school_number(self):
        allocator = IdentifierAllocator(FakeIndex(), rng=random.Random(1))

        student_id = await allocator.allocate_student_id("482913")

        assert len(student_id) == 10
        assert student_id.startswith("482913")
        assert IdentifierAllocator.validate_student_id(student_id, "482913")

    @pytest.mark.asyncio
    async def test_skips_taken_candidates(self):
        rng = random.Random(3)
        taken = IdentifierAllocator(FakeIndex(), rng=random.Random(3)).candidate_school_number()
        allocator = IdentifierAllocator(FakeIndex(school_numbers={taken}), rng=rng)

        assert await allocator.allocate_school_number() != taken

    @pytest.mark.asyncio
    async def test_rejects_malformed_school_number(self):
        allocator = IdentifierAllocator(FakeIndex())

        with pytest.raises(ValueError):
            await allocator.allocate_student_id("12345")

    @pytest.mark.asyncio
    async def test_exhaustion(self):
        allocator = IdentifierAllocator(FullIndex(), max_attempts=5)

        with pytest.raises(AllocationExhaustedError) as exc_info:
            await allocator.allocate_school_number()

        assert exc_info.value.attempts == 5
        assert exc_info.value.status_code == 500
        assert "school number" in exc_info.value.message

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            IdentifierAllocator(FakeIndex(), max_attempts=0)


class TestInsertWithRetry:
    """Test that insert collisions trigger a fresh allocation."""

    @pytest.mark.asyncio
    async def test_retries_on_collision_of_allocated_field(self):
        allocator = IdentifierAllocator(FakeIndex(), rng=random.Random(11))
        attempts: list[str] = []

        async def insert(school_number: str) -> str:
            attempts.append(school_number)
            if len(attempts) < 3:
                raise ConflictError("School Number already exists", field=SCHOOL_NUMBER_FIELD)
            return school_number

        result = await allocator.insert_with_retry(
            allocator.allocate_school_number, insert, SCHOOL_NUMBER_FIELD
        )

        assert len(attempts) == 3
        assert result == attempts[-1]

    @pytest.mark.asyncio
    async def test_other_conflicts_propagate(self):
        allocator = IdentifierAllocator(FakeIndex())

        async def insert(student_id: str) -> str:
            raise ConflictError("Email already exists", field="email")

        with pytest.raises(ConflictError) as exc_info:
            await allocator.insert_with_retry(
                lambda: allocator.allocate_student_id("482913"), insert, STUDENT_ID_FIELD
            )

        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        allocator = IdentifierAllocator(FakeIndex(), max_attempts=4)
        calls = 0

        async def insert(student_id: str) -> str:
            nonlocal calls
            calls += 1
            raise ConflictError("Student ID already exists", field=STUDENT_ID_FIELD)

        with pytest.raises(AllocationExhaustedError):
            await allocator.insert_with_retry(
                lambda: allocator.allocate_student_id("482913"), insert, STUDENT_ID_FIELD
            )

        assert calls == 4

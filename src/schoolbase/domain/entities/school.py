"""School (tenant) validity rules.

A school is usable until its ``valid_until`` timestamp. Reactivation pushes
the date forward by a whole number of calendar months from the moment of
reactivation.
"""

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def add_months(value: datetime, months: int) -> datetime:
    """Return ``value`` shifted by ``months`` calendar months.

    The day is clamped to the last day of the target month, so
    31 October + 4 months is 28 (or 29) February.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def is_expired(valid_until: datetime, now: datetime) -> bool:
    """A school is expired strictly after its validity timestamp."""
    return ensure_utc(now) > ensure_utc(valid_until)


@dataclass(frozen=True)
class SchoolValidity:
    """Point-in-time validity status of a school."""

    school_id: str
    school_number: str
    name: str
    valid_until: datetime
    last_reactivated_at: datetime | None
    expired: bool
    days_remaining: int

    @classmethod
    def evaluate(
        cls,
        *,
        school_id: str,
        school_number: str,
        name: str,
        valid_until: datetime,
        last_reactivated_at: datetime | None,
        now: datetime,
    ) -> "SchoolValidity":
        """Compute the status of a school at ``now``.

        ``days_remaining`` is rounded up and is negative for expired schools.
        """
        delta = ensure_utc(valid_until) - ensure_utc(now)
        return cls(
            school_id=school_id,
            school_number=school_number,
            name=name,
            valid_until=ensure_utc(valid_until),
            last_reactivated_at=(
                ensure_utc(last_reactivated_at) if last_reactivated_at else None
            ),
            expired=is_expired(valid_until, now),
            days_remaining=math.ceil(delta.total_seconds() / 86400),
        )

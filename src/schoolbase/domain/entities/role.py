"""Closed set of account roles."""

from enum import Enum


class Role(str, Enum):
    """Role of an account.

    SUPERADMIN accounts belong to no school. Every other role is scoped to
    exactly one school (the tenant).
    """

    SUPERADMIN = "SUPERADMIN"
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"

    @property
    def is_tenant_scoped(self) -> bool:
        """Whether accounts with this role belong to a school."""
        return self is not Role.SUPERADMIN


# Roles a school admin may create inside their own school
SCHOOL_MEMBER_ROLES = frozenset({Role.ADMIN, Role.TEACHER, Role.STUDENT})

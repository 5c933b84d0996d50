"""Role and tenant scoped authorization.

Every operation is named in :class:`Operation` and mapped to the roles that
may perform it in a single table. Tenant scope and tenant validity are
checked separately because they need the target record or the caller's
school, which only the service layer has.
"""

from datetime import datetime
from enum import Enum

from schoolbase.core.exceptions import ForbiddenError, TenantExpiredError, ValidationError
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import Role, SessionClaims, ensure_utc, is_expired

logger = get_logger(__name__)


class Operation(str, Enum):
    # Superadmin console
    CREATE_SCHOOL = "create_school"
    LIST_SCHOOLS = "list_schools"
    REACTIVATE_SCHOOL = "reactivate_school"
    DELETE_SCHOOL = "delete_school"
    LIST_ADMINS = "list_admins"
    MANAGE_OWN_SUPERADMIN_PROFILE = "manage_own_superadmin_profile"
    MANAGE_ACCOUNTS = "manage_accounts"
    VIEW_SCHOOL_VALIDITY = "view_school_validity"

    # School administration
    CREATE_USER = "create_user"
    BULK_CREATE_STUDENTS = "bulk_create_students"
    UPDATE_USER = "update_user"
    LIST_USERS = "list_users"
    VIEW_STATS = "view_stats"
    LIST_SUBJECTS = "list_subjects"
    MANAGE_SUBJECTS = "manage_subjects"
    MANAGE_EXAMS = "manage_exams"

    # Members
    VIEW_STUDENT_PROFILE = "view_student_profile"
    VIEW_STUDENT_RECORDS = "view_student_records"
    VIEW_TEACHER_PROFILE = "view_teacher_profile"


_SUPERADMIN = frozenset({Role.SUPERADMIN})
_ADMINS = frozenset({Role.SUPERADMIN, Role.ADMIN})

POLICY: dict[Operation, frozenset[Role]] = {
    Operation.CREATE_SCHOOL: _SUPERADMIN,
    Operation.LIST_SCHOOLS: _SUPERADMIN,
    Operation.REACTIVATE_SCHOOL: _SUPERADMIN,
    Operation.DELETE_SCHOOL: _SUPERADMIN,
    Operation.LIST_ADMINS: _SUPERADMIN,
    Operation.MANAGE_OWN_SUPERADMIN_PROFILE: _SUPERADMIN,
    Operation.MANAGE_ACCOUNTS: _SUPERADMIN,
    Operation.VIEW_SCHOOL_VALIDITY: _SUPERADMIN,
    Operation.CREATE_USER: _ADMINS,
    Operation.BULK_CREATE_STUDENTS: _ADMINS,
    Operation.UPDATE_USER: _ADMINS,
    Operation.LIST_USERS: _ADMINS,
    Operation.VIEW_STATS: frozenset({Role.ADMIN}),
    Operation.LIST_SUBJECTS: frozenset(Role),
    Operation.MANAGE_SUBJECTS: _ADMINS,
    Operation.MANAGE_EXAMS: _ADMINS,
    Operation.VIEW_STUDENT_PROFILE: frozenset({Role.STUDENT}),
    Operation.VIEW_STUDENT_RECORDS: frozenset({Role.STUDENT}),
    Operation.VIEW_TEACHER_PROFILE: frozenset({Role.TEACHER}),
}


def is_allowed(role: Role, operation: Operation) -> bool:
    """Look up ``(role, operation)`` in the policy table."""
    return role in POLICY.get(operation, frozenset())


def authorize(claims: SessionClaims, operation: Operation) -> None:
    """Fail unless the caller's role may perform ``operation``.

    Raises:
        ForbiddenError: If the role is not allowed.
    """
    if not is_allowed(claims.role, operation):
        logger.info(
            "Authorization denied",
            account_id=claims.account_id,
            role=claims.role.value,
            operation=operation.value,
        )
        raise ForbiddenError()


def ensure_tenant_scope(
    claims: SessionClaims,
    target_school_id: str | None,
    message: str | None = None,
) -> None:
    """Fail if the caller may not touch a record owned by ``target_school_id``.

    SUPERADMIN is unrestricted. Every other role must share the target's school.

    Raises:
        ForbiddenError: On cross-tenant access.
    """
    if claims.role is Role.SUPERADMIN:
        return
    if target_school_id is None or target_school_id != claims.school_id:
        logger.warning(
            "Cross-tenant access denied",
            account_id=claims.account_id,
            role=claims.role.value,
            school_id=claims.school_id,
            target_school_id=target_school_id,
        )
        raise ForbiddenError(message)


def resolve_school_id(claims: SessionClaims, requested_school_id: str | None) -> str:
    """Pick the school an operation acts on.

    Tenant roles always act on their own school and any requested school is
    ignored. A superadmin has no school and must name one.

    Raises:
        ValidationError: If a superadmin did not name a school.
    """
    if claims.role.is_tenant_scoped:
        return claims.school_id  # type: ignore[return-value]
    if not requested_school_id:
        raise ValidationError("School ID is required")
    return requested_school_id


def ensure_tenant_active(valid_until: datetime, now: datetime) -> None:
    """Fail if the school's validity has passed.

    Raises:
        TenantExpiredError: If ``now`` is after ``valid_until``.
    """
    if is_expired(valid_until, now):
        raise TenantExpiredError(ensure_utc(valid_until))

"""Domain services for SchoolBase.

Services hold the business rules that span entities: identifier allocation,
authorization, login and verification, and the tenant and membership
workflows built on them.
"""

from schoolbase.domain.services.access_guard import (
    POLICY,
    Operation,
    authorize,
    ensure_tenant_active,
    ensure_tenant_scope,
    is_allowed,
    resolve_school_id,
)
from schoolbase.domain.services.account_service import AccountService
from schoolbase.domain.services.auth_service import (
    AuthService,
    LoginCommand,
    LoginResult,
    claims_for,
)
from schoolbase.domain.services.catalogue_service import (
    STANDARD_SUBJECTS,
    ExamScheduleService,
    SubjectService,
)
from schoolbase.domain.services.identifier_allocator import (
    IdentifierAllocator,
    UniquenessIndex,
)
from schoolbase.domain.services.school_service import CreateSchoolCommand, SchoolService
from schoolbase.domain.services.superadmin_service import (
    SuperadminCreationError,
    SuperadminService,
)
from schoolbase.domain.services.user_service import (
    BulkCreateResult,
    NewMember,
    UserService,
)
from schoolbase.domain.services.verification_service import SuperadminVerificationService

__all__ = [
    "AccountService",
    "AuthService",
    "BulkCreateResult",
    "CreateSchoolCommand",
    "ExamScheduleService",
    "IdentifierAllocator",
    "LoginCommand",
    "LoginResult",
    "NewMember",
    "Operation",
    "POLICY",
    "STANDARD_SUBJECTS",
    "SchoolService",
    "SubjectService",
    "SuperadminCreationError",
    "SuperadminService",
    "SuperadminVerificationService",
    "UniquenessIndex",
    "UserService",
    "authorize",
    "claims_for",
    "ensure_tenant_active",
    "ensure_tenant_scope",
    "is_allowed",
    "resolve_school_id",
]

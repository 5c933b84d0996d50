"""Domain entities for SchoolBase.

Entities are plain Python types that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from schoolbase.domain.entities.claims import SessionClaims
from schoolbase.domain.entities.role import SCHOOL_MEMBER_ROLES, Role
from schoolbase.domain.entities.school import (
    SchoolValidity,
    add_months,
    ensure_utc,
    is_expired,
    utc_now,
)
from schoolbase.domain.entities.verification import (
    EmailVerificationState,
    LoginStage,
    TwoFactorChallenge,
    codes_match,
    email_verification_state,
    generate_code,
)

__all__ = [
    "EmailVerificationState",
    "LoginStage",
    "Role",
    "SCHOOL_MEMBER_ROLES",
    "SchoolValidity",
    "SessionClaims",
    "TwoFactorChallenge",
    "add_months",
    "codes_match",
    "email_verification_state",
    "ensure_utc",
    "generate_code",
    "is_expired",
    "utc_now",
]

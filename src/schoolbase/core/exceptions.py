"""Error taxonomy shared by the domain, persistence and HTTP layers.

Every error carries the HTTP status it maps to and a message that is safe to
show to clients. Internal detail (raw store errors, stack traces) stays in the
exception chain and the logs.
"""

from datetime import datetime
from typing import Any


class SchoolBaseError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def extra(self) -> dict[str, Any]:
        """Additional fields merged into the error response body."""
        return {}


class ValidationError(SchoolBaseError):
    """Missing or malformed input the caller can correct."""

    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(SchoolBaseError):
    """Missing credentials or credentials that do not match."""

    status_code = 401
    default_message = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    """Session token is malformed, expired, or not signed by us."""

    default_message = "Invalid token"


class ForbiddenError(SchoolBaseError):
    """Role or tenant scope does not permit the operation."""

    status_code = 403
    default_message = "Forbidden"


class EmailNotVerifiedError(ForbiddenError):
    """Superadmin tried to log in before verifying their email."""

    default_message = "Email not verified"

    def extra(self) -> dict[str, Any]:
        return {"requiresVerification": True}


class TenantExpiredError(ForbiddenError):
    """The account's school is past its validity date."""

    default_message = "School license expired. Please contact Super Admin."

    def __init__(self, valid_until: datetime, message: str | None = None) -> None:
        self.valid_until = valid_until
        super().__init__(message)

    def extra(self) -> dict[str, Any]:
        return {"isSchoolExpired": True, "validUntil": self.valid_until.isoformat()}


class NotFoundError(SchoolBaseError):
    """Target record does not exist (or is invisible to the caller)."""

    status_code = 404
    default_message = "Not found"


class ConflictError(SchoolBaseError):
    """A unique constraint rejected the write."""

    status_code = 400
    default_message = "Resource already exists"

    def __init__(self, message: str | None = None, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)

    def extra(self) -> dict[str, Any]:
        return {"field": self.field} if self.field else {}


class InvalidOrExpiredCodeError(SchoolBaseError):
    """A one-time verification or 2FA code did not match or has expired."""

    status_code = 400
    default_message = "Invalid or expired code"


class AllocationExhaustedError(SchoolBaseError):
    """No free identifier was found within the retry budget."""

    status_code = 500
    default_message = "Could not allocate a unique identifier"

    def __init__(self, kind: str, attempts: int) -> None:
        self.kind = kind
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique {kind} after {attempts} attempts")


class ServiceUnavailableError(SchoolBaseError):
    """A downstream collaborator (mail, AI) failed."""

    status_code = 503
    default_message = "Service temporarily unavailable"

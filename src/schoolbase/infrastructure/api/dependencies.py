"""FastAPI dependencies for authentication and authorization.

``get_current_claims`` turns the Bearer token into :class:`SessionClaims`.
``require(operation)`` applies the access policy and, for school members,
re-reads the school so an expired tenant is refused on every request.
"""

from functools import lru_cache
from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.exceptions import UnauthorizedError
from schoolbase.core.logging import get_logger
from schoolbase.domain.entities import SessionClaims, utc_now
from schoolbase.domain.services import Operation, authorize, ensure_tenant_active
from schoolbase.infrastructure.auth import jwt_service
from schoolbase.infrastructure.persistence.database import get_db_session
from schoolbase.infrastructure.persistence.repositories import SchoolRepository
from schoolbase.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_current_claims(
    authorization: Annotated[str | None, Header()] = None,
) -> SessionClaims:
    """Extract and verify the session token from the Authorization header.

    Raises:
        UnauthorizedError: If the header is missing or malformed.
        InvalidTokenError: If the token fails verification.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise UnauthorizedError("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise UnauthorizedError()

    return jwt_service.verify(parts[1])


CurrentClaims = Annotated[SessionClaims, Depends(get_current_claims)]


def require(operation: Operation) -> Callable[..., Awaitable[SessionClaims]]:
    """Build a dependency that authorizes ``operation`` for the caller.

    Example:
        @router.get("/stats")
        async def stats(claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_STATS))]):
            ...
    """

    async def dependency(claims: CurrentClaims, session: DbSession) -> SessionClaims:
        authorize(claims, operation)
        if claims.role.is_tenant_scoped:
            school = await SchoolRepository(session).get_by_id(claims.school_id)
            if school is None:
                logger.info("Authentication failed: school no longer exists", school_id=claims.school_id)
                raise UnauthorizedError()
            ensure_tenant_active(school.valid_until, utc_now())
        return claims

    return dependency


@lru_cache
def get_email_service() -> EmailService:
    """Process-wide mail service built from settings."""
    return EmailService.from_settings()


Mailer = Annotated[EmailService, Depends(get_email_service)]

"""Teacher portal routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from schoolbase.domain.entities import SessionClaims
from schoolbase.domain.services import AccountService, Operation
from schoolbase.infrastructure.api.dependencies import DbSession, require
from schoolbase.infrastructure.api.schemas import MemberProfileResponse

router = APIRouter()


@router.get("/profile", response_model=MemberProfileResponse)
async def get_profile(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_TEACHER_PROFILE))],
) -> MemberProfileResponse:
    """Return the calling teacher's profile and school."""
    return MemberProfileResponse.model_validate(await AccountService(session).get_own_profile(claims))

"""Student portal routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from schoolbase.domain.entities import SessionClaims
from schoolbase.domain.services import AccountService, Operation
from schoolbase.infrastructure.api.dependencies import DbSession, require
from schoolbase.infrastructure.api.schemas import (
    AttendanceResponse,
    MemberProfileResponse,
    ResultsResponse,
)

router = APIRouter()


@router.get("/profile", response_model=MemberProfileResponse)
async def get_profile(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_STUDENT_PROFILE))],
) -> MemberProfileResponse:
    """Return the calling student's profile and school."""
    return MemberProfileResponse.model_validate(await AccountService(session).get_own_profile(claims))


@router.get("/results", response_model=ResultsResponse)
async def get_results(
    claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_STUDENT_RECORDS))],
) -> ResultsResponse:
    # results are not recorded yet
    return ResultsResponse()


@router.get("/attendance", response_model=AttendanceResponse)
async def get_attendance(
    claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_STUDENT_RECORDS))],
) -> AttendanceResponse:
    return AttendanceResponse()

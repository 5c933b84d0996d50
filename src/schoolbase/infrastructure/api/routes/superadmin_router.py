"""Superadmin console routes.

Provides school provisioning and lifecycle, the global administrator list,
the superadmin's own profile, and account activation and deletion.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from schoolbase.domain.entities import SessionClaims
from schoolbase.domain.services import (
    AccountService,
    CreateSchoolCommand,
    Operation,
    SchoolService,
)
from schoolbase.infrastructure.api.dependencies import DbSession, require
from schoolbase.infrastructure.api.schemas import (
    AdminResponse,
    ChangePasswordRequest,
    CreateSchoolRequest,
    MessageResponse,
    ProfileResponse,
    ProfileSummary,
    ReactivateSchoolResponse,
    SchoolCreatedResponse,
    SchoolListItem,
    SchoolResponse,
    SchoolValidityResponse,
    UpdateProfileRequest,
    UpdateProfileResponse,
    UserResponse,
)

router = APIRouter()


@router.post(
    "/schools",
    status_code=status.HTTP_201_CREATED,
    response_model=SchoolCreatedResponse,
)
async def create_school(
    request: CreateSchoolRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.CREATE_SCHOOL))],
) -> SchoolCreatedResponse:
    """Create a school, allocate its number, and create its first admin."""
    school, admin = await SchoolService(session).create_school(
        CreateSchoolCommand(
            name=request.name,
            address=request.address,
            phone=request.phone,
            email=request.email,
            max_students=request.max_students,
            max_teachers=request.max_teachers,
            admin_email=request.admin_email,
            admin_password=request.admin_password,
            admin_first_name=request.admin_first_name,
            admin_last_name=request.admin_last_name,
        )
    )
    return SchoolCreatedResponse(
        **SchoolResponse.model_validate(school).model_dump(),
        users=[UserResponse.model_validate(admin)],
    )


@router.get("/schools", response_model=list[SchoolListItem])
async def list_schools(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.LIST_SCHOOLS))],
) -> list[SchoolListItem]:
    """List every school with its account count."""
    return [
        SchoolListItem(**SchoolResponse.model_validate(school).model_dump(), user_count=count)
        for school, count in await SchoolService(session).list_schools()
    ]


@router.get("/schools/validity", response_model=list[SchoolValidityResponse])
async def school_validity(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_SCHOOL_VALIDITY))],
) -> list[SchoolValidityResponse]:
    """Report each school's expiry status and days remaining."""
    return [
        SchoolValidityResponse.model_validate(entry)
        for entry in await SchoolService(session).validity_report()
    ]


@router.post("/schools/{school_id}/reactivate", response_model=ReactivateSchoolResponse)
async def reactivate_school(
    school_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.REACTIVATE_SCHOOL))],
) -> ReactivateSchoolResponse:
    school = await SchoolService(session).reactivate_school(school_id)
    return ReactivateSchoolResponse(school=SchoolResponse.model_validate(school))


@router.delete("/schools/{school_id}", response_model=MessageResponse)
async def delete_school(
    school_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.DELETE_SCHOOL))],
) -> MessageResponse:
    """Delete a school and every account in it."""
    await SchoolService(session).delete_school(school_id)
    return MessageResponse(message="School deleted successfully")


@router.get("/admins", response_model=list[AdminResponse])
async def list_admins(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.LIST_ADMINS))],
) -> list[AdminResponse]:
    return [AdminResponse.model_validate(admin) for admin in await SchoolService(session).list_admins()]


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_OWN_SUPERADMIN_PROFILE))],
) -> ProfileResponse:
    return ProfileResponse.model_validate(await AccountService(session).get_own_profile(claims))


@router.put("/profile", response_model=UpdateProfileResponse)
async def update_profile(
    request: UpdateProfileRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_OWN_SUPERADMIN_PROFILE))],
) -> UpdateProfileResponse:
    user = await AccountService(session).update_profile(
        claims,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
    )
    return UpdateProfileResponse(user=ProfileSummary.model_validate(user))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_OWN_SUPERADMIN_PROFILE))],
) -> MessageResponse:
    await AccountService(session).change_password(
        claims, request.current_password, request.new_password
    )
    return MessageResponse(message="Password updated successfully")


@router.post("/accounts/{user_id}/activate", response_model=UserResponse)
async def activate_account(
    user_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_ACCOUNTS))],
) -> UserResponse:
    return UserResponse.model_validate(await AccountService(session).set_active(user_id, True))


@router.post("/accounts/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_account(
    user_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_ACCOUNTS))],
) -> UserResponse:
    """Deactivate an account. It can no longer log in."""
    return UserResponse.model_validate(await AccountService(session).set_active(user_id, False))


@router.delete("/accounts/{user_id}", response_model=MessageResponse)
async def delete_account(
    user_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_ACCOUNTS))],
) -> MessageResponse:
    await AccountService(session).delete_account(claims, user_id)
    return MessageResponse(message="Account deleted successfully")

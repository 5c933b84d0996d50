"""School administration routes.

ADMIN callers always act on their own school; SUPERADMIN callers pass the
target school as ``schoolId`` (body for account creation, query otherwise).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from schoolbase.domain.entities import SessionClaims
from schoolbase.domain.services import (
    ExamScheduleService,
    NewMember,
    Operation,
    SubjectService,
    UserService,
    resolve_school_id,
)
from schoolbase.infrastructure.api.dependencies import DbSession, require
from schoolbase.infrastructure.api.schemas import (
    BulkCreateRequest,
    BulkCreateResponse,
    CreateUserRequest,
    ExamRequest,
    ExamResponse,
    ExamUpdateRequest,
    MessageResponse,
    StatsResponse,
    SubjectRequest,
    SubjectResponse,
    UpdateUserRequest,
    UserResponse,
)

router = APIRouter()

SchoolIdQuery = Annotated[str | None, Query(alias="schoolId")]


@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def create_user(
    request: CreateUserRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.CREATE_USER))],
) -> UserResponse:
    """Add an ADMIN, TEACHER or STUDENT to a school.

    Students receive a generated ``studentId``. Teacher and student
    capacity limits of the school are enforced.
    """
    member = NewMember(
        email=request.email,
        password=request.password,
        role=request.role,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        address=request.address,
        student_class=request.student_class,
        subjects=request.subjects,
    )
    user = await UserService(session).create_user(claims, member, request.school_id)
    return UserResponse.model_validate(user)


@router.post("/users/bulk", response_model=BulkCreateResponse)
async def bulk_create_students(
    request: BulkCreateRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.BULK_CREATE_STUDENTS))],
) -> BulkCreateResponse:
    """Import students from spreadsheet rows, reporting each row's outcome."""
    result = await UserService(session).bulk_create_students(
        claims,
        [row.model_dump() for row in request.students],
        request.school_id,
    )
    return BulkCreateResponse(
        message=result.message,
        success_count=len(result.created),
        failure_count=len(result.errors),
        created=result.created,
        errors=result.errors,
    )


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.UPDATE_USER))],
) -> UserResponse:
    user = await UserService(session).update_user(claims, user_id, request.changes())
    return UserResponse.model_validate(user)


@router.get("/users/{role}", response_model=list[UserResponse])
async def list_users(
    role: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.LIST_USERS))],
    school_id: SchoolIdQuery = None,
) -> list[UserResponse]:
    """List the accounts of one role in a school, newest first."""
    users = await UserService(session).list_users(claims, role, school_id)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/stats", response_model=StatsResponse)
async def stats(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.VIEW_STATS))],
) -> StatsResponse:
    return StatsResponse.model_validate(await UserService(session).stats(claims))


@router.get("/subjects", response_model=list[SubjectResponse])
async def list_subjects(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.LIST_SUBJECTS))],
) -> list[SubjectResponse]:
    return [SubjectResponse.model_validate(s) for s in await SubjectService(session).list_subjects()]


@router.post("/subjects", status_code=status.HTTP_201_CREATED, response_model=SubjectResponse)
async def create_subject(
    request: SubjectRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_SUBJECTS))],
) -> SubjectResponse:
    subject = await SubjectService(session).create_subject(
        request.name, request.section, request.category
    )
    return SubjectResponse.model_validate(subject)


@router.delete("/subjects/{subject_id}", response_model=MessageResponse)
async def delete_subject(
    subject_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_SUBJECTS))],
) -> MessageResponse:
    await SubjectService(session).delete_subject(subject_id)
    return MessageResponse(message="Subject deleted successfully")


@router.get("/exams", response_model=list[ExamResponse])
async def list_exams(
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_EXAMS))],
    school_id: SchoolIdQuery = None,
) -> list[ExamResponse]:
    """List a school's exam schedules ordered by date."""
    exams = await ExamScheduleService(session).list_exams(resolve_school_id(claims, school_id))
    return [ExamResponse.model_validate(exam) for exam in exams]


@router.post("/exams", status_code=status.HTTP_201_CREATED, response_model=ExamResponse)
async def create_exam(
    request: ExamRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_EXAMS))],
    school_id: SchoolIdQuery = None,
) -> ExamResponse:
    exam = await ExamScheduleService(session).create_exam(
        resolve_school_id(claims, school_id),
        subject=request.subject,
        student_class=request.student_class,
        exam_date=request.exam_date,
        time=request.time,
        duration=request.duration,
        type=request.type,
    )
    return ExamResponse.model_validate(exam)


@router.put("/exams/{exam_id}", response_model=ExamResponse)
async def update_exam(
    exam_id: str,
    request: ExamUpdateRequest,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_EXAMS))],
    school_id: SchoolIdQuery = None,
) -> ExamResponse:
    exam = await ExamScheduleService(session).update_exam(
        resolve_school_id(claims, school_id), exam_id, request.changes()
    )
    return ExamResponse.model_validate(exam)


@router.delete("/exams/{exam_id}", response_model=MessageResponse)
async def delete_exam(
    exam_id: str,
    session: DbSession,
    claims: Annotated[SessionClaims, Depends(require(Operation.MANAGE_EXAMS))],
    school_id: SchoolIdQuery = None,
) -> MessageResponse:
    await ExamScheduleService(session).delete_exam(resolve_school_id(claims, school_id), exam_id)
    return MessageResponse(message="Exam schedule deleted successfully")

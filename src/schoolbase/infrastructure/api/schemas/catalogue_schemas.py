"""Pydantic schemas for subjects and exam schedules."""

from datetime import date, datetime
from typing import Any

from pydantic import Field

from schoolbase.infrastructure.api.schemas.base import CamelModel


class SubjectRequest(CamelModel):
    name: str | None = None
    section: str | None = Field(None, description="JUNIOR or SENIOR")
    category: str | None = None


class SubjectResponse(CamelModel):
    id: str
    name: str
    section: str
    category: str
    created_at: datetime | None = None


class ExamRequest(CamelModel):
    subject: str = Field(..., min_length=1)
    student_class: str = Field(..., alias="class")
    exam_date: date = Field(..., alias="date")
    time: str | None = None
    duration: str | None = None
    type: str | None = None


class ExamUpdateRequest(CamelModel):
    subject: str | None = Field(None, min_length=1)
    student_class: str | None = Field(None, alias="class")
    exam_date: date | None = Field(None, alias="date")
    time: str | None = None
    duration: str | None = None
    type: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=False)


class ExamResponse(CamelModel):
    id: str
    school_id: str
    subject: str
    student_class: str = Field(..., alias="class")
    exam_date: date = Field(..., alias="date")
    time: str | None = None
    duration: str | None = None
    type: str | None = None
    created_at: datetime | None = None

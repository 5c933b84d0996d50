"""SQLAlchemy models for SchoolBase tables.

All models inherit from the Base class defined in database.py and are
created on application startup outside production.
"""

from schoolbase.infrastructure.persistence.models.exam_schedule import ExamScheduleModel
from schoolbase.infrastructure.persistence.models.school import SchoolModel
from schoolbase.infrastructure.persistence.models.subject import SubjectModel
from schoolbase.infrastructure.persistence.models.user import UserModel

__all__ = [
    "ExamScheduleModel",
    "SchoolModel",
    "SubjectModel",
    "UserModel",
]

"""API route modules, one router per audience."""

from schoolbase.infrastructure.api.routes.admin_router import router as admin_router
from schoolbase.infrastructure.api.routes.auth_router import router as auth_router
from schoolbase.infrastructure.api.routes.student_router import router as student_router
from schoolbase.infrastructure.api.routes.superadmin_router import router as superadmin_router
from schoolbase.infrastructure.api.routes.teacher_router import router as teacher_router

__all__ = [
    "admin_router",
    "auth_router",
    "student_router",
    "superadmin_router",
    "teacher_router",
]

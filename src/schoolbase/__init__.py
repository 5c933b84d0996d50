"""SchoolBase - Multi-tenant school management backend.

Super-admins provision schools, school admins manage teachers and students,
and every request is scoped to the caller's role and school.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

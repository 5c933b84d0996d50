"""Authentication infrastructure components.

This module provides password hashing and session token services.
"""

from schoolbase.infrastructure.auth.jwt_service import JWTService, jwt_service
from schoolbase.infrastructure.auth.password_hasher import (
    dummy_password_hash,
    hash_password,
    needs_rehash,
    verify_password,
)

__all__ = [
    "JWTService",
    "dummy_password_hash",
    "hash_password",
    "jwt_service",
    "needs_rehash",
    "verify_password",
]

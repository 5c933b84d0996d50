"""Password hashing utility using Argon2.

Provides salted, adaptive password hashing and verification using the
Argon2id algorithm. Cost parameters come from settings so deployments can
tune them without code changes; comparison is constant time inside argon2.
"""

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from schoolbase.core.config import get_settings


@lru_cache
def get_hasher() -> PasswordHasher:
    """Build the process-wide hasher from the configured cost parameters."""
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.password_hash_time_cost,
        memory_cost=settings.password_hash_memory_cost,
        parallelism=settings.password_hash_parallelism,
    )


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash. May be empty.

    Returns:
        The encoded hash, including algorithm parameters and salt.

    Example:
        >>> hashed = hash_password("SecureP@ss123!")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return get_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    Args:
        password: The plaintext password to verify.
        hashed: The stored hash.

    Returns:
        True if the password matches, False otherwise (including when the
        stored hash is malformed).

    Example:
        >>> hashed = hash_password("SecureP@ss123!")
        >>> verify_password("SecureP@ss123!", hashed)
        True
        >>> verify_password("wrong", hashed)
        False
    """
    try:
        return get_hasher().verify(hashed, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was produced with outdated cost parameters.

    Should be called after a successful verification; if True the password
    should be hashed again and the stored hash replaced.
    """
    return get_hasher().check_needs_rehash(hashed)


@lru_cache
def dummy_password_hash() -> str:
    """Hash compared against when an account does not exist.

    Verifying against it costs the same as a real verification, so response
    time does not reveal whether an identity is registered.
    """
    return hash_password("schoolbase-dummy-password")

"""Session claims sealed into signed tokens."""

from dataclasses import dataclass
from typing import Any

from schoolbase.domain.entities.role import Role


@dataclass(frozen=True)
class SessionClaims:
    """Authenticated principal carried by a session token.

    Attributes:
        account_id: ID of the authenticated account.
        role: Role of the account at the time the token was issued.
        school_id: School the account belongs to (None for superadmins).
        school_number: Human-readable number of that school.
        email: Account email, when the account has one.
    """

    account_id: str
    role: Role
    school_id: str | None = None
    school_number: str | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        if not self.account_id:
            raise ValueError("Account ID is required")
        if self.role.is_tenant_scoped and not self.school_id:
            raise ValueError(f"{self.role.value} claims require a school ID")

    def to_payload(self) -> dict[str, Any]:
        """Serialise to the JSON-compatible token payload."""
        payload: dict[str, Any] = {
            "sub": self.account_id,
            "role": self.role.value,
        }
        if self.school_id is not None:
            payload["school_id"] = self.school_id
        if self.school_number is not None:
            payload["school_number"] = self.school_number
        if self.email is not None:
            payload["email"] = self.email
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SessionClaims":
        """Rebuild claims from a verified token payload.

        Raises:
            KeyError: If a required claim is missing.
            ValueError: If a claim has an invalid value.
        """
        return cls(
            account_id=payload["sub"],
            role=Role(payload["role"]),
            school_id=payload.get("school_id"),
            school_number=payload.get("school_number"),
            email=payload.get("email"),
        )

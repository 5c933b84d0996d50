"""Verification states for superadmin accounts.

Registration moves a superadmin from UNREGISTERED to
PENDING_EMAIL_VERIFICATION; presenting the emailed code moves it to VERIFIED.
Independently, each login of a verified superadmin passes through
PENDING_TWO_FACTOR before it is AUTHENTICATED; member logins are
AUTHENTICATED directly.
"""

import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

from schoolbase.domain.entities.school import ensure_utc


class EmailVerificationState(str, Enum):
    UNREGISTERED = "unregistered"
    PENDING_EMAIL_VERIFICATION = "pending_email_verification"
    VERIFIED = "verified"


class LoginStage(str, Enum):
    PENDING_TWO_FACTOR = "pending_two_factor"
    AUTHENTICATED = "authenticated"


class VerifiableAccount(Protocol):
    is_email_verified: bool
    verification_code: str | None
    two_factor_code: str | None
    two_factor_expires: datetime | None


def email_verification_state(account: VerifiableAccount | None) -> EmailVerificationState:
    """Return where an account stands in the email verification flow."""
    if account is None:
        return EmailVerificationState.UNREGISTERED
    if account.is_email_verified:
        return EmailVerificationState.VERIFIED
    return EmailVerificationState.PENDING_EMAIL_VERIFICATION


def generate_code() -> str:
    """Generate a 6-digit one-time code without a leading zero."""
    return str(100000 + secrets.randbelow(900000))


def codes_match(expected: str | None, presented: str | None) -> bool:
    """Compare one-time codes in constant time; a cleared code never matches."""
    if not expected or not presented:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), presented.encode("utf-8"))


@dataclass(frozen=True)
class TwoFactorChallenge:
    """A pending 2FA code and the moment it stops being accepted."""

    code: str
    expires_at: datetime

    @classmethod
    def issue(cls, now: datetime, ttl: timedelta) -> "TwoFactorChallenge":
        return cls(code=generate_code(), expires_at=ensure_utc(now) + ttl)

    @classmethod
    def of(cls, account: VerifiableAccount) -> "TwoFactorChallenge | None":
        """Return the account's outstanding challenge, if any."""
        if not account.two_factor_code or account.two_factor_expires is None:
            return None
        return cls(code=account.two_factor_code, expires_at=ensure_utc(account.two_factor_expires))

    def is_expired(self, now: datetime) -> bool:
        return ensure_utc(now) > self.expires_at

    def accepts(self, presented: str | None, now: datetime) -> bool:
        """Whether ``presented`` completes the challenge at ``now``."""
        return codes_match(self.code, presented) and not self.is_expired(now)

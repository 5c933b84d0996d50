"""JWT session token service.

Seals :class:`SessionClaims` into HS256-signed tokens and validates them.
Tokens carry an expiry only when ``session_ttl_minutes`` is configured and
cannot be revoked server-side; logout is client-side.
"""

from datetime import datetime, timedelta, timezone

import jwt

from schoolbase.core.config import get_settings
from schoolbase.core.exceptions import InvalidTokenError
from schoolbase.domain.entities import SessionClaims


class JWTService:
    """Issues and verifies signed session tokens."""

    ALGORITHM = "HS256"
    ISSUER = "schoolbase"

    def __init__(self, secret_key: str | None = None, ttl_minutes: int | None = None) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Signing secret. Defaults to ``session_secret`` from settings.
            ttl_minutes: Token lifetime. Defaults to ``session_ttl_minutes``
                from settings; ``None`` there means tokens do not expire.
        """
        self._secret_key = secret_key
        self._ttl_minutes = ttl_minutes

    @property
    def secret_key(self) -> str:
        if self._secret_key:
            return self._secret_key
        return get_settings().session_secret

    @property
    def ttl(self) -> timedelta | None:
        minutes = self._ttl_minutes
        if minutes is None:
            minutes = get_settings().session_ttl_minutes
        return timedelta(minutes=minutes) if minutes else None

    def issue(self, claims: SessionClaims) -> str:
        """Sign ``claims`` into a token.

        Args:
            claims: The authenticated principal.

        Returns:
            Encoded JWT.
        """
        now = datetime.now(timezone.utc)
        payload = {"iss": self.ISSUER, "iat": now, **claims.to_payload()}
        ttl = self.ttl
        if ttl is not None:
            payload["exp"] = now + ttl
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> SessionClaims:
        """Validate a token and return the claims it carries.

        Raises:
            InvalidTokenError: If the signature, issuer or expiry check fails,
                or a required claim is missing or malformed.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e

        try:
            return SessionClaims.from_payload(payload)
        except (KeyError, ValueError) as e:
            raise InvalidTokenError("Invalid token claims") from e


# Default JWT service instance
jwt_service = JWTService()

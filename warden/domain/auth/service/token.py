"""Token service for JWT creation and validation."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from warden.config import JwtConfig
from warden.domain.auth.model.value import UserId
from warden.domain.shared.service import Service

AUDIENCE = "authenticated"


class TokenService(Service):
    """Issues and validates HS256 access tokens.

    Tokens carry ``sub`` (the user id) and ``username``. Roles are never put in
    the token; they are looked up on every request.
    """

    _config: JwtConfig

    def create_access_token(
        self,
        user_id: UserId,
        username: str,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        """Create a JWT access token.

        Args:
            user_id: The user's internal ID
            username: The user's login name
            additional_claims: Optional extra claims to include

        Returns:
            Encoded JWT string
        """
        now = datetime.now(UTC)
        expires_at = now + timedelta(minutes=self._config.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "username": username,
            "aud": AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": secrets.token_hex(16),
        }

        if additional_claims:
            payload.update(additional_claims)

        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate and decode a JWT access token.

        Raises:
            jwt.InvalidTokenError: If token is invalid or expired
        """
        return jwt.decode(
            token,
            self._config.secret,
            algorithms=[self._config.algorithm],
            audience=AUDIENCE,
            options={"require": ["sub", "exp"]},
        )

    @property
    def access_token_expire_seconds(self) -> int:
        return self._config.access_token_expire_minutes * 60

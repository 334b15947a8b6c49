"""JWT verification for moderator access."""

import os
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError


@dataclass
class Principal:
    """Caller identity taken from a verified access token."""

    user_id: str
    roles: list[str] = field(default_factory=list)

    def has_role(self, role: str) -> bool:
        """Check role membership, ignoring case."""
        return role.lower() in (r.lower() for r in self.roles)


class AuthenticationError(Exception):
    """Authentication error."""

    pass


class AuthService:
    """Issues and verifies HS256 access tokens."""

    JWT_ALGORITHM = "HS256"
    JWT_EXPIRATION_HOURS = 8

    def __init__(self, jwt_secret: str | None = None):
        """Initialize auth service.

        Args:
            jwt_secret: Secret for signing JWTs
        """
        self.jwt_secret = jwt_secret or os.environ.get(
            "JWT_SECRET_KEY", "dev-secret-change-in-prod"
        )

    def create_access_token(
        self, user_id: str, roles: list[str] | None = None
    ) -> dict[str, Any]:
        """Create an access token for a user.

        Args:
            user_id: User ID, becomes the token subject
            roles: Roles granted to the user

        Returns:
            Dict with access_token, token_type and expires_in
        """
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "type": "access",
            "roles": roles or [],
            "iat": now,
            "exp": now + timedelta(hours=self.JWT_EXPIRATION_HOURS),
        }
        return {
            "access_token": jwt.encode(
                payload, self.jwt_secret, algorithm=self.JWT_ALGORITHM
            ),
            "token_type": "Bearer",
            "expires_in": self.JWT_EXPIRATION_HOURS * 3600,
        }

    def verify_access_token(self, token: str) -> Principal:
        """Verify an access token and return the caller.

        Args:
            token: JWT access token

        Returns:
            Principal with the token subject and roles

        Raises:
            AuthenticationError: If token is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.JWT_ALGORITHM],
                options={"verify_exp": True},
            )
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTError as e:
            raise AuthenticationError(f"Invalid token: {str(e)}")

        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type")

        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("Missing user ID in token")

        roles = payload.get("roles") or []
        if not isinstance(roles, list):
            roles = [roles]
        return Principal(user_id=user_id, roles=[str(r) for r in roles])

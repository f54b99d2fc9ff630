"""Access token verification."""

from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.models import AuthUser


class AuthGateway(Protocol):
    """Interface to the hosted auth provider."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for a valid access token, otherwise None."""


@dataclass
class AuthService:
    """Resolves bearer tokens to authenticated users."""

    gateway: AuthGateway

    def authenticate(self, authorization: str | None) -> AuthUser | None:
        """Return the user for an ``Authorization: Bearer`` header value."""
        token = parse_bearer_token(authorization)
        if token is None:
            return None
        return self.gateway.get_user(token)


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from a bearer authorization header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

"""Supabase auth gateway."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.models import AuthUser
from calorie_tracker.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Validates access tokens against Supabase auth."""

    client: Client

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user behind an access token, or None when rejected."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception:
            _logger.warning("Supabase rejected access token", exc_info=True)
            return None
        if response is None or response.user is None:
            return None
        return AuthUser(id=UUID(response.user.id), email=response.user.email)

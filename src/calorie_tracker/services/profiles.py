"""Profile lifecycle and nutrition target management."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.models import UserProfile
from calorie_tracker.services.cache import Cache
from calorie_tracker.services.targets import compute_targets

DEFAULT_WEIGHT_KG = 70.0
DEFAULT_HEIGHT_CM = 170.0
DEFAULT_AGE = 30
DEFAULT_GENDER = "male"
DEFAULT_ACTIVITY_LEVEL = 1.375
DEFAULT_GOAL_OFFSET = 0

BODY_FIELDS = frozenset(
    {"weight", "height", "age", "gender", "activity_level", "goal_offset"}
)
TARGET_FIELDS = frozenset(
    {"target_calories", "target_protein", "target_carbs", "target_fat"}
)

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Insert or replace a profile and return the stored row."""


@dataclass
class ProfileService:
    """Application service for profiles and their targets."""

    repository: ProfileRepository
    cache: Cache
    cache_ttl_seconds: int = 300

    def ensure_profile(self, user_id: UUID, email: str | None) -> UserProfile:
        """Return the user's profile, creating a default one if missing."""
        cache_key = _cache_key(user_id)
        cached = self.cache.get(cache_key)
        if isinstance(cached, UserProfile):
            return cached

        profile = self.repository.get_profile(user_id)
        if profile is None:
            profile = self.repository.upsert_profile(
                default_profile(user_id, email or "")
            )
            _logger.info("Created default profile for user %s", user_id)
        self.cache.set(cache_key, profile, ttl_seconds=self.cache_ttl_seconds)
        return profile

    def update_profile(
        self, user_id: UUID, email: str | None, updates: dict[str, object]
    ) -> UserProfile:
        """Apply updates and recompute targets when body data changes.

        Explicit target values in the update are stored as given and
        suppress recalculation.
        """
        unknown = set(updates) - BODY_FIELDS - TARGET_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        current = self.ensure_profile(user_id, email)
        updated = replace(current, **updates)
        # A zero target counts as unset, so body changes still recompute it.
        sets_targets = any(updates.get(name) for name in TARGET_FIELDS)
        if BODY_FIELDS & set(updates) and not sets_targets:
            updated = with_computed_targets(updated)

        stored = self.repository.upsert_profile(updated)
        self.cache.delete(_cache_key(user_id))
        return stored


def default_profile(user_id: UUID, email: str) -> UserProfile:
    """Build a new profile with default body data and computed targets."""
    profile = UserProfile(
        id=user_id,
        email=email,
        weight=DEFAULT_WEIGHT_KG,
        height=DEFAULT_HEIGHT_CM,
        age=DEFAULT_AGE,
        gender=DEFAULT_GENDER,
        activity_level=DEFAULT_ACTIVITY_LEVEL,
        goal_offset=DEFAULT_GOAL_OFFSET,
        target_calories=0,
        target_protein=0,
        target_carbs=0,
        target_fat=0,
    )
    return with_computed_targets(profile)


def with_computed_targets(profile: UserProfile) -> UserProfile:
    """Return the profile with targets derived from its body data."""
    targets = compute_targets(profile.inputs())
    return replace(
        profile,
        target_calories=targets.calories,
        target_protein=targets.protein_g,
        target_carbs=targets.carbs_g,
        target_fat=targets.fat_g,
    )


def _cache_key(user_id: UUID) -> str:
    return f"profile:{user_id}"

"""Supabase-backed profile repository."""

from dataclasses import asdict, dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.models import UserProfile
from calorie_tracker.services.profiles import ProfileRepository

_COLUMNS = (
    "id, email, weight, height, age, gender, activity_level, goal_offset, "
    "target_calories, target_protein, target_carbs, target_fat"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the ``users`` profile table."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Insert or update the profile row keyed by id."""
        payload = asdict(profile)
        payload["id"] = str(profile.id)
        response = (
            self.client.table("users").upsert(payload, on_conflict="id").execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert user profile in Supabase")
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfile:
    return UserProfile(
        id=UUID(str(row["id"])),
        email=str(row.get("email") or ""),
        weight=float(row["weight"]),
        height=float(row["height"]),
        age=int(row["age"]),
        gender="female" if row.get("gender") == "female" else "male",
        activity_level=float(row["activity_level"]),
        goal_offset=int(row.get("goal_offset") or 0),
        target_calories=int(row.get("target_calories") or 0),
        target_protein=int(row.get("target_protein") or 0),
        target_carbs=int(row.get("target_carbs") or 0),
        target_fat=int(row.get("target_fat") or 0),
    )

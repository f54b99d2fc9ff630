"""Supabase repository for weight entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.models import WeightEntry
from calorie_tracker.services.weights import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for the ``weight_entries`` table."""

    client: Client

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        """Return weight entries for a user, oldest first."""
        response = (
            self.client.table("weight_entries")
            .select("id, user_id, weight, created_at")
            .eq("user_id", str(user_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def create_entry(self, user_id: UUID, weight: float) -> WeightEntry:
        """Insert a weight entry row."""
        response = (
            self.client.table("weight_entries")
            .insert({"user_id": str(user_id), "weight": weight})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight entry")
        return _parse_entry(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete a weight entry scoped to its owner."""
        response = (
            self.client.table("weight_entries")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_entry(row: dict[str, object]) -> WeightEntry:
    return WeightEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        weight=float(row["weight"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )

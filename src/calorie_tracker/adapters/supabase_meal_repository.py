"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.models import MealRecord
from calorie_tracker.services.meals import MealRepository

_COLUMNS = (
    "id, user_id, meal_name, ingredients, calories, protein, carbs, fat, "
    "created_at, image_url"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the ``meals`` table."""

    client: Client

    def list_meals(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealRecord]:
        """Return meals newest first, optionally within a time range."""
        query = self.client.table("meals").select(_COLUMNS).eq("user_id", str(user_id))
        if start is not None:
            query = query.gte("created_at", start.isoformat())
        if end is not None:
            query = query.lt("created_at", end.isoformat())
        response = query.order("created_at", desc=True).execute()
        return [_parse_meal(row) for row in response.data or []]

    def create_meal(self, user_id: UUID, payload: dict[str, object]) -> MealRecord:
        """Insert a meal row and return it."""
        response = (
            self.client.table("meals")
            .insert({**payload, "user_id": str(user_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def update_meal(
        self, user_id: UUID, meal_id: UUID, payload: dict[str, object]
    ) -> MealRecord | None:
        """Update a meal row scoped to its owner."""
        response = (
            self.client.table("meals")
            .update(payload)
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal row scoped to its owner."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_meal(row: dict[str, object]) -> MealRecord:
    ingredients = row.get("ingredients")
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_name=str(row.get("meal_name") or ""),
        ingredients=list(ingredients) if isinstance(ingredients, list) else None,
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        image_url=row.get("image_url"),
    )

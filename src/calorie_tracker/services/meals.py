"""Meal logging and daily totals."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_tracker.domain.models import DailyTotals, MealRecord
from calorie_tracker.domain.nutrition import NutritionRecord

MEAL_FIELDS = frozenset(
    {"meal_name", "ingredients", "calories", "protein", "carbs", "fat", "image_url"}
)

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def list_meals(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealRecord]:
        """Return meals newest first, optionally within [start, end)."""

    def create_meal(self, user_id: UUID, payload: dict[str, object]) -> MealRecord:
        """Insert a meal and return it."""

    def update_meal(
        self, user_id: UUID, meal_id: UUID, payload: dict[str, object]
    ) -> MealRecord | None:
        """Update a meal owned by the user, returning None when not found."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user; return whether a row was removed."""


@dataclass
class MealService:
    """Service for meal CRUD and per-day aggregation."""

    repository: MealRepository

    def list_meals(self, user_id: UUID) -> list[MealRecord]:
        """Return all meals for the user, newest first."""
        return self.repository.list_meals(user_id)

    def day(
        self,
        user_id: UUID,
        day: date,
        timezone_name: str,
        name_filter: str | None = None,
    ) -> tuple[DailyTotals, list[MealRecord]]:
        """Return meals and totals for a local calendar day.

        ``name_filter`` keeps only meals whose name contains it, ignoring
        case; totals cover the filtered meals.
        """
        tz = ZoneInfo(timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
        meals = self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        selected = [
            meal for meal in meals if meal.created_at.astimezone(tz).date() == day
        ]
        if name_filter:
            needle = name_filter.casefold()
            selected = [
                meal
                for meal in selected
                if meal.meal_name and needle in meal.meal_name.casefold()
            ]
        return daily_totals(day, selected), selected

    def today(
        self, user_id: UUID, timezone_name: str
    ) -> tuple[DailyTotals, list[MealRecord]]:
        """Return today's totals and meals in the user's timezone."""
        local_today = datetime.now(tz=ZoneInfo(timezone_name)).date()
        return self.day(user_id, local_today, timezone_name)

    def add_meal(self, user_id: UUID, payload: dict[str, object]) -> MealRecord:
        """Store a manually entered meal."""
        _check_fields(payload)
        meal = self.repository.create_meal(user_id, payload)
        _logger.info("Meal %s added for user %s", meal.id, user_id)
        return meal

    def log_record(
        self, user_id: UUID, record: NutritionRecord, image_url: str | None = None
    ) -> MealRecord:
        """Store an analyzed nutrition record as a meal."""
        payload: dict[str, object] = {
            "meal_name": record.display_name(),
            "ingredients": record.ingredients,
            "calories": record.calories,
            "protein": record.protein_g,
            "carbs": record.carbs_g,
            "fat": record.fat_g,
            "image_url": image_url,
        }
        return self.add_meal(user_id, payload)

    def update_meal(
        self, user_id: UUID, meal_id: UUID, updates: dict[str, object]
    ) -> MealRecord | None:
        """Update a meal owned by the user."""
        _check_fields(updates)
        return self.repository.update_meal(user_id, meal_id, updates)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user."""
        deleted = self.repository.delete_meal(user_id, meal_id)
        if deleted:
            _logger.info("Meal %s deleted for user %s", meal_id, user_id)
        return deleted


def daily_totals(day: date, meals: list[MealRecord]) -> DailyTotals:
    """Sum macros over meals, counting missing values as zero."""
    return DailyTotals(
        day=day,
        calories=sum(meal.calories or 0 for meal in meals),
        protein=sum(meal.protein or 0 for meal in meals),
        carbs=sum(meal.carbs or 0 for meal in meals),
        fat=sum(meal.fat or 0 for meal in meals),
    )


def _check_fields(payload: dict[str, object]) -> None:
    unknown = set(payload) - MEAL_FIELDS
    if unknown:
        raise ValueError(f"Unknown meal fields: {sorted(unknown)}")

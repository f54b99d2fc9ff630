"""Domain models for the calorie tracker."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from calorie_tracker.domain.nutrition import NutritionTargets, ProfileInputs, Sex


@dataclass(frozen=True)
class AuthUser:
    """Authenticated caller resolved from an access token."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class UserProfile:
    """Represents a user profile stored in the database."""

    id: UUID
    email: str
    weight: float
    height: float
    age: int
    gender: Sex
    activity_level: float
    goal_offset: int
    target_calories: int
    target_protein: int
    target_carbs: int
    target_fat: int

    def inputs(self) -> ProfileInputs:
        """Return the calculator inputs for this profile."""
        return ProfileInputs(
            weight_kg=self.weight,
            height_cm=self.height,
            age_years=self.age,
            sex=self.gender,
            activity_factor=self.activity_level,
            goal_offset_kcal=self.goal_offset,
        )

    def targets(self) -> NutritionTargets:
        """Return the stored targets."""
        return NutritionTargets(
            calories=self.target_calories,
            protein_g=self.target_protein,
            carbs_g=self.target_carbs,
            fat_g=self.target_fat,
        )


@dataclass(frozen=True)
class MealRecord:
    """Logged meal with its macros."""

    id: UUID
    user_id: UUID
    meal_name: str
    ingredients: list[str] | None
    calories: float
    protein: float
    carbs: float
    fat: float
    created_at: datetime
    image_url: str | None = None


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class WeightEntry:
    """Single body weight measurement."""

    id: UUID
    user_id: UUID
    weight: float
    created_at: datetime


@dataclass(frozen=True)
class WeightPoint:
    """Chart point holding the latest weight of a day."""

    day: date
    weight: float

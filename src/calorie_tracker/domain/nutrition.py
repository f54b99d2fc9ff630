"""Nutrition domain models."""

from dataclasses import dataclass
from typing import Literal

Sex = Literal["male", "female"]


@dataclass(frozen=True)
class NutritionTargets:
    """Daily calorie and macronutrient targets."""

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


@dataclass(frozen=True)
class ProfileInputs:
    """Physical profile and goal used to compute targets."""

    weight_kg: float
    height_cm: float
    age_years: int
    sex: Sex
    activity_factor: float
    goal_offset_kcal: int


@dataclass(frozen=True)
class NutritionRecord:
    """Nutrition facts extracted from an AI response."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meal_name: str | list[str] | None = None
    ingredients: list[str] | None = None
    raw_response: str | None = None

    def to_wire(self) -> dict[str, object]:
        """Return the record using the keys of the analysis prompt contract."""
        payload: dict[str, object] = {}
        if self.meal_name is not None:
            payload["mealName"] = self.meal_name
        if self.ingredients is not None:
            payload["ingredients"] = self.ingredients
        payload.update(
            {
                "calories": self.calories,
                "protein": self.protein_g,
                "carbs": self.carbs_g,
                "fat": self.fat_g,
            }
        )
        return payload

    def display_name(self) -> str:
        """Return a single display name for the meal."""
        if isinstance(self.meal_name, list):
            names = [name for name in self.meal_name if name]
            return ", ".join(names) or "Meal"
        return self.meal_name or "Meal"

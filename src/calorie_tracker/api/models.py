"""Pydantic request models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TargetsPreviewRequest(BaseModel):
    """Profile inputs for an unauthenticated target preview."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age_years: int = Field(gt=0)
    sex: Literal["male", "female"]
    activity_factor: float = Field(default=1.375, ge=1.2, le=1.9)
    goal_offset_kcal: int = Field(default=0, ge=-1000, le=1000)
    protein_ratio: float = Field(default=0.3, ge=0.0, le=1.0)
    fat_ratio: float = Field(default=0.3, ge=0.0, le=1.0)


class ProfileUpdate(BaseModel):
    """Partial profile update."""

    model_config = ConfigDict(extra="forbid")

    weight: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    age: int | None = Field(default=None, gt=0)
    gender: Literal["male", "female"] | None = None
    activity_level: float | None = Field(default=None, ge=1.2, le=1.9)
    goal_offset: int | None = Field(default=None, ge=-1000, le=1000)
    target_calories: int | None = Field(default=None, ge=0)
    target_protein: int | None = Field(default=None, ge=0)
    target_carbs: int | None = Field(default=None, ge=0)
    target_fat: int | None = Field(default=None, ge=0)


class TextAnalysisRequest(BaseModel):
    """Free-text meal description to analyze."""

    description: str = Field(min_length=1, max_length=2000)
    log: bool = False


class MealCreate(BaseModel):
    """Manually entered meal."""

    model_config = ConfigDict(extra="forbid")

    meal_name: str = Field(min_length=1)
    ingredients: list[str] | None = None
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    image_url: str | None = None


class MealUpdate(BaseModel):
    """Partial meal update."""

    model_config = ConfigDict(extra="forbid")

    meal_name: str | None = Field(default=None, min_length=1)
    ingredients: list[str] | None = None
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    image_url: str | None = None


class WeightCreate(BaseModel):
    """New weight measurement in kilograms."""

    weight: float = Field(gt=0, le=500)

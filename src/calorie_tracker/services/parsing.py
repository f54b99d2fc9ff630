"""Extraction of nutrition records from free-form model output."""

import json
import math
import re

from calorie_tracker.domain.nutrition import NutritionRecord

_MACRO_KEYS = ("calories", "protein", "carbs", "fat")

_FALLBACK_PATTERNS = {
    key: re.compile(rf'{key}"?:?\s*(\d+(?:\.\d+)?)', re.IGNORECASE)
    for key in _MACRO_KEYS
}
_MEAL_NAME_PATTERN = re.compile(r'mealName"?+:?+\s*"([^"]+)"', re.IGNORECASE)


class ParseError(ValueError):
    """Raised when no complete nutrition record can be extracted."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.message = message
        self.raw_text = raw_text


def parse_nutrition_response(raw_text: str) -> NutritionRecord:
    """Parse model output into a nutrition record.

    Tries the outermost ``{...}`` span as JSON first, then falls back to
    key/number regexes over the whole text. Raises ParseError when neither
    yields all four macros.
    """
    candidate = _extract_json_span(raw_text)
    if candidate is not None:
        record = _parse_json_candidate(candidate, raw_text)
        if record is not None:
            return record

    record = _parse_with_regex(raw_text)
    if record is not None:
        return record

    raise ParseError(
        "Failed to parse nutrition information from AI response", raw_text
    )


def _extract_json_span(raw_text: str) -> str | None:
    """Return the text between the first '{' and the last '}', inclusive."""
    first = raw_text.find("{")
    last = raw_text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        return None
    return raw_text[first : last + 1]


def _parse_json_candidate(candidate: str, raw_text: str) -> NutritionRecord | None:
    try:
        data = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    if not all(_is_number(data.get(key)) for key in _MACRO_KEYS):
        return None

    meal_name = data.get("mealName")
    if meal_name is not None and not _is_meal_name(meal_name):
        return None

    ingredients = data.get("ingredients")
    if ingredients is not None and not isinstance(ingredients, list):
        ingredients = [str(ingredients)]

    return NutritionRecord(
        calories=data["calories"],
        protein_g=data["protein"],
        carbs_g=data["carbs"],
        fat_g=data["fat"],
        meal_name=meal_name,
        ingredients=ingredients,
        raw_response=raw_text,
    )


def _parse_with_regex(raw_text: str) -> NutritionRecord | None:
    values: dict[str, float] = {}
    for key, pattern in _FALLBACK_PATTERNS.items():
        match = pattern.search(raw_text)
        if match is None:
            return None
        values[key] = float(match.group(1))

    name_match = _MEAL_NAME_PATTERN.search(raw_text)
    return NutritionRecord(
        calories=values["calories"],
        protein_g=values["protein"],
        carbs_g=values["carbs"],
        fat_g=values["fat"],
        meal_name=name_match.group(1) if name_match else None,
        raw_response=raw_text,
    )


def _is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _is_meal_name(value: object) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _reject_constant(name: str) -> float:
    raise ValueError(f"Unsupported JSON constant: {name}")

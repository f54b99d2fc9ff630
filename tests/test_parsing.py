"""Tests for AI response parsing."""

import json

import pytest

from calorie_tracker.domain.nutrition import NutritionRecord
from calorie_tracker.services.parsing import ParseError, parse_nutrition_response

RECORD_JSON = (
    '{"mealName": "Cheeseburger with Fries", '
    '"ingredients": ["Beef Patty", "Burger Bun", "French Fries"], '
    '"portionSize": "large", "calories": 950, "protein": 35, '
    '"carbs": 80, "fat": 55.5}'
)


def test_parses_bare_json() -> None:
    record = parse_nutrition_response(RECORD_JSON)

    assert record.meal_name == "Cheeseburger with Fries"
    assert record.ingredients == ["Beef Patty", "Burger Bun", "French Fries"]
    assert (record.calories, record.protein_g, record.carbs_g, record.fat_g) == (
        950,
        35,
        80,
        55.5,
    )
    assert record.raw_response == RECORD_JSON


def test_parses_json_wrapped_in_prose_and_fences() -> None:
    raw = f"Here you go: ```json\n{RECORD_JSON}\n``` Hope that helps!"

    wrapped = parse_nutrition_response(raw)
    bare = parse_nutrition_response(RECORD_JSON)

    assert wrapped.to_wire() == bare.to_wire()
    assert wrapped.raw_response == raw


def test_wire_round_trip() -> None:
    original = NutritionRecord(
        calories=512.5,
        protein_g=30,
        carbs_g=41,
        fat_g=22,
        meal_name=["Pad Thai", "Spring Rolls"],
        ingredients=["Rice Noodles", "Shrimp"],
    )

    parsed = parse_nutrition_response(json.dumps(original.to_wire()))

    assert parsed.to_wire() == original.to_wire()


def test_non_list_ingredients_are_wrapped() -> None:
    raw = '{"calories": 300, "protein": 10, "carbs": 40, "fat": 9, "ingredients": "oats"}'

    record = parse_nutrition_response(raw)

    assert record.ingredients == ["oats"]


def test_missing_optional_fields_stay_absent() -> None:
    record = parse_nutrition_response(
        '{"calories": 300, "protein": 10, "carbs": 40, "fat": 9}'
    )

    assert record.meal_name is None
    assert record.ingredients is None
    assert "mealName" not in record.to_wire()


def test_prose_falls_back_to_regex() -> None:
    raw = "Estimated totals -> calories: 500, protein: 30, carbs: 40, fat: 20."

    record = parse_nutrition_response(raw)

    assert (record.calories, record.protein_g, record.carbs_g, record.fat_g) == (
        500,
        30,
        40,
        20,
    )
    assert record.ingredients is None
    assert record.meal_name is None


def test_truncated_json_falls_back_to_regex_with_meal_name() -> None:
    raw = (
        '{"mealName": "Oatmeal", "ingredients": ["Oats", "Milk"], '
        '"calories": 320.5, "protein": 12, "carbs": 50, "fat": 7, "notes": "'
    )

    record = parse_nutrition_response(raw)

    assert record.meal_name == "Oatmeal"
    assert record.calories == 320.5
    assert record.ingredients is None


def test_quoted_numbers_raise_parse_error() -> None:
    raw = '{"calories": "450", "protein": "20", "carbs": "30", "fat": "15"}'

    with pytest.raises(ParseError):
        parse_nutrition_response(raw)


def test_boolean_macro_is_rejected_then_regex_applies() -> None:
    raw = '{"calories": 410, "protein": true, "carbs": 30, "fat": 15} protein: 25'

    record = parse_nutrition_response(raw)

    assert record.protein_g == 25
    assert record.ingredients is None


def test_invalid_meal_name_type_falls_through() -> None:
    raw = '{"mealName": 42, "calories": 200, "protein": 5, "carbs": 30, "fat": 6}'

    record = parse_nutrition_response(raw)

    assert record.meal_name is None
    assert record.calories == 200


def test_truncated_list_meal_name_is_not_captured() -> None:
    raw = (
        '{"mealName": ["Pad Thai", "Spring Rolls"], "calories": 900, '
        '"protein": 30, "carbs": 120, "fat": 28, "note": "'
    )

    record = parse_nutrition_response(raw)

    assert record.meal_name is None
    assert record.carbs_g == 120


def test_fallback_meal_name_without_key_quote() -> None:
    record = parse_nutrition_response(
        'mealName: "Oatmeal" calories: 300 protein: 10 carbs: 54 fat: 6'
    )

    assert record.meal_name == "Oatmeal"


def test_keys_are_case_insensitive_in_fallback() -> None:
    record = parse_nutrition_response("CALORIES 610 Protein 41 Carbs 52 FAT 18")

    assert record.fat_g == 18


def test_missing_macro_raises_parse_error() -> None:
    raw = "calories: 500, protein: 30, carbs: 40"

    with pytest.raises(ParseError) as excinfo:
        parse_nutrition_response(raw)

    assert excinfo.value.raw_text == raw


def test_no_numbers_raises_parse_error() -> None:
    raw = "I couldn't analyze this image."

    with pytest.raises(ParseError) as excinfo:
        parse_nutrition_response(raw)

    assert excinfo.value.raw_text == raw
    assert "Failed to parse" in excinfo.value.message


def test_reversed_braces_are_ignored() -> None:
    with pytest.raises(ParseError):
        parse_nutrition_response("} nothing here {")

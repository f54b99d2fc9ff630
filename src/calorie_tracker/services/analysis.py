"""Food analysis service using a multimodal LLM."""

import base64
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.nutrition import NutritionRecord
from calorie_tracker.services.parsing import parse_nutrition_response

_RESPONSE_CONTRACT = """Respond ONLY with a valid JSON object containing:
- "mealName": string or array of strings for dish name(s)
- "ingredients": array of strings listing primary ingredients
- "portionSize": estimated portion size (small/medium/large)
- "calories": number (total calories)
- "protein": number (grams)
- "carbs": number (grams)
- "fat": number (grams)"""

IMAGE_PROMPT = f"""Analyze this food image carefully.

TASKS:
1. Identify the main dish(es) shown and estimate the portion size (small, medium, large).
2. List all visible primary ingredients.
3. Consider the scale/size of the food relative to plate or utensils if visible.
4. Provide realistic nutritional information for the exact portion shown.

Considerations for accurate estimates:
- Look for size references (plates, utensils, hands) to gauge portion size
- Consider standard serving sizes for similar dishes
- Account for visible oils, sauces, and toppings
- Be conservative with estimates if uncertain

{_RESPONSE_CONTRACT}

Example: {{"mealName": "Cheeseburger with Fries", "ingredients": ["Beef Patty", "Burger Bun", "Cheese", "Lettuce", "Tomato", "French Fries"], "portionSize": "large", "calories": 950, "protein": 35, "carbs": 80, "fat": 55}}"""  # noqa: E501

TEXT_PROMPT_TEMPLATE = """Based on this food description: "{description}", analyze the meal carefully.

TASKS:
1. Identify the main dish(es) and estimate the portion size based on the description.
2. List all mentioned ingredients and infer likely ingredients if not explicitly stated.
3. If the description mentions any sizing (small, medium, large) or quantities, use that information.
4. Provide realistic nutritional information for the described portion.

If the text includes any corrections or updates to a previous analysis, prioritize those changes.

{contract}

Example: {{"mealName": "Salmon with Rice and Vegetables", "ingredients": ["Salmon Fillet", "Brown Rice", "Broccoli", "Carrots", "Olive Oil"], "portionSize": "medium", "calories": 550, "protein": 35, "carbs": 45, "fat": 25}}"""  # noqa: E501


class AnalysisError(RuntimeError):
    """Raised when the analysis model cannot be reached or returns nothing."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisClient(Protocol):
    """Interface for LLM food analysis."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str | None,
        temperature: float,
    ) -> str:
        """Return the raw model text for the prompt."""


@dataclass
class AnalysisService:
    """Service that builds analysis prompts and parses model output."""

    client: AnalysisClient
    model: str
    temperature: float = 0.0

    async def analyze_image(self, image_bytes: bytes) -> NutritionRecord:
        """Estimate nutrition facts for a food photo."""
        if not image_bytes:
            raise AnalysisError("Image is empty", status_code=400)
        raw = await self._complete(IMAGE_PROMPT, _to_data_url(image_bytes))
        return parse_nutrition_response(raw)

    async def analyze_text(self, description: str) -> NutritionRecord:
        """Estimate nutrition facts for a text description of a meal."""
        cleaned = description.strip()
        if not cleaned:
            raise AnalysisError("Description is empty", status_code=400)
        prompt = TEXT_PROMPT_TEMPLATE.format(
            description=cleaned, contract=_RESPONSE_CONTRACT
        )
        raw = await self._complete(prompt, None)
        return parse_nutrition_response(raw)

    async def _complete(self, prompt: str, image_data_url: str | None) -> str:
        try:
            return await self.client.complete(
                model=self.model,
                prompt=prompt,
                image_data_url=image_data_url,
                temperature=self.temperature,
            )
        except AnalysisError:
            raise
        except Exception as exc:
            raise AnalysisError(
                f"An unexpected error occurred: {exc}",
                status_code=_status_code_from_exception(exc),
            ) from exc


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract an HTTP status code from an SDK exception, if available."""
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"

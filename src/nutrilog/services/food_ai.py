"""Food recognition, search and advice backed by a generative model."""

import base64
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutrilog.domain.ai import (
    FormatError,
    NutritionAdvice,
    ParsedPayload,
    RecognitionResult,
    SearchOutcome,
)
from nutrilog.domain.entries import FoodEntry
from nutrilog.domain.foods import FoodCandidate, SourceTag
from nutrilog.domain.goals import DailyGoal

_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")

_CATEGORIES = "Proteins, Vegetables, Fruits, Grains, Dairy, Snacks, Beverages"

_FOOD_SHAPE = """{
  "id": "unique_id",
  "name": "Food Name",
  "calories_per_100g": 250,
  "protein_per_100g": 15.5,
  "carbs_per_100g": 30.2,
  "fat_per_100g": 8.1,
  "fiber_per_100g": 2.5,
  "sugar_per_100g": 5.0,
  "category": "Proteins|Vegetables|Fruits|Grains|Dairy|Snacks",
  "brand": "Brand Name (if applicable)"
}"""

RECOGNITION_PROMPT = f"""Analyze this food image and provide detailed nutritional \
information. Return a JSON response with the following structure:
{{
  "confidence": 0.85,
  "suggestions": [
{_FOOD_SHAPE}
  ]
}}

Rules:
1. Provide 1-3 most likely food items you can identify
2. Use accurate nutritional values per 100g
3. Confidence should be between 0.1-1.0
4. Categories: {_CATEGORIES}
5. If you can't identify the food clearly, provide generic similar foods
6. Return only valid JSON, no additional text
"""

SEARCH_PROMPT_TEMPLATE = """Search for food items matching "{query}" and provide \
detailed nutritional information. Return a JSON array with the following structure:
[
{food_shape}
]

Rules:
1. Provide 3-8 most relevant food items matching the search query
2. Use accurate nutritional values per 100g from reliable sources
3. Include common variations and brands if applicable
4. Categories: {categories}
5. Return only valid JSON array, no additional text
6. If no matches, return empty array []
"""

ADVICE_PROMPT_TEMPLATE = """As a professional nutritionist, analyze this user's \
nutrition data and provide personalized advice:

Daily Goals:
- Calories: {calories}
- Protein: {protein}g
- Carbs: {carbs}g
- Fat: {fat}g

Recent Food Entries (last 7 days):
{entries}

Provide a JSON response with:
{{
  "overall_assessment": "Brief overall nutrition assessment",
  "recommendations": [
    "Specific actionable recommendation 1",
    "Specific actionable recommendation 2",
    "Specific actionable recommendation 3"
  ],
  "missing_nutrients": ["nutrient1", "nutrient2"],
  "excess_nutrients": ["nutrient1", "nutrient2"],
  "meal_suggestions": [
    {{
      "meal_type": "breakfast|lunch|dinner|snack",
      "suggestion": "Specific meal suggestion",
      "reason": "Why this meal is recommended"
    }}
  ]
}}

Keep advice professional, actionable, and suitable for business professionals.
"""

_logger = logging.getLogger(__name__)


class TextGenerationClient(Protocol):
    """Interface for free-text generation with optional image input."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_url: str | None = None,
    ) -> str:
        """Return the model's raw text output."""


@dataclass
class FoodAIService:
    """Builds prompts and turns model output into food data."""

    client: TextGenerationClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def recognize_food(self, image_bytes: bytes) -> RecognitionResult:
        """Suggest foods for a photo, falling back to a generic item."""
        try:
            text = await self._generate(
                RECOGNITION_PROMPT, image_data_url=_to_data_url(image_bytes)
            )
        except Exception:
            _logger.exception("Food recognition request failed")
            return fallback_recognition()

        parsed = extract_json_object(text)
        if isinstance(parsed, FormatError):
            _logger.warning("Food recognition output unusable: %s", parsed.reason)
            return fallback_recognition()
        payload = parsed.value if isinstance(parsed.value, dict) else {}
        suggestions = payload.get("suggestions")
        if not isinstance(suggestions, list):
            _logger.warning("Food recognition output has no suggestions list")
            return fallback_recognition()

        confidence = _to_number(payload.get("confidence")) or 0.5
        return RecognitionResult(
            confidence=min(max(confidence, 0.0), 1.0),
            suggestions=[
                _normalise_food(item, SourceTag.RECOGNITION, index)
                for index, item in enumerate(suggestions)
            ],
        )

    async def search_foods(self, query: str) -> SearchOutcome:
        """Suggest foods matching a text query."""
        if not query.strip():
            return SearchOutcome(ok=True, items=[])
        prompt = SEARCH_PROMPT_TEMPLATE.format(
            query=query.strip(), food_shape=_FOOD_SHAPE, categories=_CATEGORIES
        )
        try:
            text = await self._generate(prompt)
        except Exception:
            _logger.exception("Food search request failed: query=%s", query)
            return SearchOutcome(ok=False, items=[])

        parsed = extract_json_array(text)
        if isinstance(parsed, FormatError) or not isinstance(parsed.value, list):
            reason = parsed.reason if isinstance(parsed, FormatError) else "not a list"
            _logger.warning("Food search output unusable: %s", reason)
            return SearchOutcome(ok=False, items=[])
        return SearchOutcome(
            ok=True,
            items=[
                _normalise_food(item, SourceTag.SEARCH, index)
                for index, item in enumerate(parsed.value)
            ],
        )

    async def get_advice(
        self, goals: DailyGoal, recent_entries: list[FoodEntry]
    ) -> NutritionAdvice:
        """Generate advice from goals and recent entries."""
        prompt = ADVICE_PROMPT_TEMPLATE.format(
            calories=goals.daily_calories,
            protein=goals.daily_protein,
            carbs=goals.daily_carbs,
            fat=goals.daily_fat,
            entries="\n".join(_format_entry(entry) for entry in recent_entries),
        )
        try:
            text = await self._generate(prompt)
        except Exception:
            _logger.exception("Advice request failed")
            return fallback_advice()

        parsed = extract_json_object(text)
        if isinstance(parsed, FormatError):
            _logger.warning("Advice output unusable: %s", parsed.reason)
            return fallback_advice()
        try:
            return NutritionAdvice.model_validate(parsed.value)
        except ValidationError:
            _logger.warning("Advice output has unexpected shape")
            return fallback_advice()

    async def _generate(self, prompt: str, image_data_url: str | None = None) -> str:
        return await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            image_data_url=image_data_url,
        )


def extract_json_object(text: str) -> ParsedPayload[object] | FormatError:
    """Parse the outermost {...} span of model output."""
    return _extract(text, _OBJECT_PATTERN, "object")


def extract_json_array(text: str) -> ParsedPayload[object] | FormatError:
    """Parse the outermost [...] span of model output."""
    return _extract(text, _ARRAY_PATTERN, "array")


def _extract(
    text: str, pattern: re.Pattern[str], kind: str
) -> ParsedPayload[object] | FormatError:
    match = pattern.search(text or "")
    if match is None:
        return FormatError(reason=f"no JSON {kind} found", raw_text=text)
    try:
        return ParsedPayload(json.loads(match.group(0)))
    except json.JSONDecodeError as exc:
        return FormatError(reason=f"invalid JSON {kind}: {exc.msg}", raw_text=text)


def fallback_recognition() -> RecognitionResult:
    """Generic suggestion used when recognition fails."""
    return RecognitionResult(
        confidence=0.5,
        suggestions=[
            FoodCandidate(
                id=SourceTag.FALLBACK.mint(),
                name="Unknown Food Item",
                calories_per_100g=200,
                protein_per_100g=10,
                carbs_per_100g=25,
                fat_per_100g=8,
                fiber_per_100g=3,
                sugar_per_100g=5,
                category="Unknown",
            )
        ],
        used_fallback=True,
    )


def fallback_advice() -> NutritionAdvice:
    """Generic advice used when the model output is unusable."""
    return NutritionAdvice(
        overall_assessment="Unable to generate personalized advice at this time.",
        recommendations=[
            "Maintain a balanced diet with variety",
            "Stay hydrated throughout the day",
            "Consider consulting with a nutritionist",
        ],
        used_fallback=True,
    )


def _normalise_food(item: object, tag: SourceTag, index: int) -> FoodCandidate:
    """Fill defaults and replace the model's id with a local placeholder."""
    data = item if isinstance(item, dict) else {}
    return FoodCandidate(
        id=tag.mint(index),
        name=str(data.get("name") or "Unknown Food"),
        calories_per_100g=_to_number(data.get("calories_per_100g")) or 100,
        protein_per_100g=_to_number(data.get("protein_per_100g")) or 5,
        carbs_per_100g=_to_number(data.get("carbs_per_100g")) or 15,
        fat_per_100g=_to_number(data.get("fat_per_100g")) or 3,
        fiber_per_100g=_to_number(data.get("fiber_per_100g")) or None,
        sugar_per_100g=_to_number(data.get("sugar_per_100g")) or None,
        category=str(data.get("category") or "Unknown"),
        brand=str(data["brand"]) if data.get("brand") else None,
    )


def _to_number(value: object) -> float:
    """Convert a JSON value to a finite float, or 0.0."""
    if isinstance(value, bool):
        return float(value)
    number = 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip() or 0)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0


def _format_entry(entry: FoodEntry) -> str:
    name = entry.food_item.name if entry.food_item else "Unknown food"
    return f"- {name}: {entry.quantity}g ({entry.meal_type.value})"


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

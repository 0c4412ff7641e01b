"""Models for generative AI results."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from nutrilog.domain.foods import FoodCandidate

T = TypeVar("T")


@dataclass(frozen=True)
class ParsedPayload(Generic[T]):
    """JSON value extracted from model output."""

    value: T


@dataclass(frozen=True)
class FormatError:
    """Model output that did not contain usable JSON."""

    reason: str
    raw_text: str


class RecognitionResult(BaseModel):
    """Food suggestions for a photo."""

    confidence: float = Field(ge=0.0, le=1.0)
    suggestions: list[FoodCandidate]
    used_fallback: bool = False


@dataclass(frozen=True)
class SearchOutcome:
    """Food suggestions for a text query."""

    ok: bool
    items: list[FoodCandidate]


class MealSuggestion(BaseModel):
    """Suggested meal with a rationale."""

    meal_type: str
    suggestion: str
    reason: str


class NutritionAdvice(BaseModel):
    """Personalised nutrition advice."""

    overall_assessment: str
    recommendations: list[str] = Field(default_factory=list)
    missing_nutrients: list[str] = Field(default_factory=list)
    excess_nutrients: list[str] = Field(default_factory=list)
    meal_suggestions: list[MealSuggestion] = Field(default_factory=list)
    used_fallback: bool = False

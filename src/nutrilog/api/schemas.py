"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from nutrilog.domain.entries import MealType


class RecognizeRequest(BaseModel):
    """Photo to analyse, inline or by URL."""

    image_base64: str | None = None
    image_url: str | None = None


class CustomFoodRequest(BaseModel):
    """Form values for a user-authored food."""

    name: str | None = None
    calories_per_100g: str | float | None = None
    protein_per_100g: str | float | None = None
    carbs_per_100g: str | float | None = None
    fat_per_100g: str | float | None = None
    category: str | None = "Unknown"


class LogEntryRequest(BaseModel):
    """Food entry to log."""

    food: dict[str, object] | None = None
    quantity: int | str = 100
    meal_type: str = MealType.LUNCH.value
    photo_url: str | None = None
    notes: str | None = None


class GoalsRequest(BaseModel):
    """Daily goal targets."""

    daily_calories: int = Field(ge=0)
    daily_protein: int = Field(ge=0)
    daily_carbs: int = Field(ge=0)
    daily_fat: int = Field(ge=0)

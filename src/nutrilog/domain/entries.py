"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from nutrilog.domain.foods import FoodItem


class MealType(str, Enum):
    """Meal an entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class NutrientTotals:
    """Calories and macros for a portion or a group of portions."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        return NutrientTotals(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
        )


ZERO_TOTALS = NutrientTotals(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class FoodEntry:
    """A single consumption entry referencing a catalog food."""

    id: UUID
    user_id: UUID
    food_item_id: UUID
    quantity: int
    meal_type: MealType
    logged_at: datetime
    photo_url: str | None = None
    notes: str | None = None
    food_item: FoodItem | None = None

    @property
    def nutrients(self) -> NutrientTotals:
        """Nutrients consumed in this entry, zero when the food is unknown."""
        if self.food_item is None:
            return ZERO_TOTALS
        return nutrients_for(self.food_item, self.quantity)


def nutrients_for(food: FoodItem, quantity: float) -> NutrientTotals:
    """Scale per-100g values to a portion in grams."""
    factor = quantity / 100.0
    return NutrientTotals(
        calories=food.calories_per_100g * factor,
        protein_g=food.protein_per_100g * factor,
        carbs_g=food.carbs_per_100g * factor,
        fat_g=food.fat_per_100g * factor,
    )

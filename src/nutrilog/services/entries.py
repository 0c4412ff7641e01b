"""Food entry logging service."""

import logging
import math
import re
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutrilog.domain.entries import FoodEntry, MealType
from nutrilog.domain.foods import FoodCandidate, FoodItem, SourceTag
from nutrilog.errors import InputValidationError
from nutrilog.services.reconciliation import FoodReconciler

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_logger = logging.getLogger(__name__)


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def create_entry(  # noqa: PLR0913
        self,
        *,
        user_id: UUID,
        food_item_id: UUID,
        quantity: int,
        meal_type: MealType,
        logged_at: datetime,
        photo_url: str | None,
        notes: str | None,
    ) -> FoodEntry:
        """Insert an entry and return it."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime | None = None
    ) -> list[FoodEntry]:
        """Return entries with joined foods in the range, newest first."""


@dataclass
class FoodEntryService:
    """Validates, reconciles and persists food entries."""

    reconciler: FoodReconciler
    repository: FoodEntryRepository

    def log_food(  # noqa: PLR0913
        self,
        user_id: UUID,
        candidate: FoodCandidate | None,
        quantity: object,
        meal_type: MealType | str = MealType.LUNCH,
        photo_url: str | None = None,
        notes: str | None = None,
    ) -> FoodEntry:
        """Log a food for the user, promoting the food into the catalog first."""
        if candidate is None or not candidate.name.strip():
            raise InputValidationError("Please select a food item")
        grams = parse_quantity(quantity)
        if grams is None or grams <= 0:
            raise InputValidationError("Please enter a quantity in grams")
        meal = _parse_meal_type(meal_type)

        food_item_id = self.reconciler.resolve(candidate)
        entry = self.repository.create_entry(
            user_id=user_id,
            food_item_id=food_item_id,
            quantity=grams,
            meal_type=meal,
            logged_at=datetime.now(tz=UTC),
            photo_url=photo_url,
            notes=notes,
        )
        _logger.info(
            "Logged food entry: entry_id=%s food_item_id=%s", entry.id, food_item_id
        )
        if entry.food_item is None:
            entry = replace(entry, food_item=_food_item(food_item_id, candidate))
        return entry

    @staticmethod
    def create_custom_food(  # noqa: PLR0913
        name: str | None,
        calories_per_100g: object,
        protein_per_100g: object = None,
        carbs_per_100g: object = None,
        fat_per_100g: object = None,
        category: str | None = None,
    ) -> FoodCandidate:
        """Build a user-authored candidate from form values."""
        if not name or not name.strip() or calories_per_100g in (None, ""):
            raise InputValidationError(
                "Please fill in at least the food name and calories"
            )
        return FoodCandidate(
            id=SourceTag.CUSTOM.mint(),
            name=name,
            calories_per_100g=parse_lenient_float(calories_per_100g),
            protein_per_100g=parse_lenient_float(protein_per_100g),
            carbs_per_100g=parse_lenient_float(carbs_per_100g),
            fat_per_100g=parse_lenient_float(fat_per_100g),
            category=category or "Unknown",
        )


def parse_quantity(value: object) -> int | None:
    """Parse a gram quantity the way a form field is read: leading digits."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_lenient_float(value: object) -> float:
    """Parse a leading number, treating anything unparseable as zero."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if match:
            return float(match.group(1))
    return 0.0


def _parse_meal_type(value: MealType | str) -> MealType:
    try:
        return MealType(value)
    except ValueError as exc:
        raise InputValidationError("Please choose a meal type") from exc


def _food_item(food_item_id: UUID, candidate: FoodCandidate) -> FoodItem:
    return FoodItem(
        id=food_item_id,
        name=candidate.name,
        calories_per_100g=candidate.calories_per_100g,
        protein_per_100g=candidate.protein_per_100g,
        carbs_per_100g=candidate.carbs_per_100g,
        fat_per_100g=candidate.fat_per_100g,
        category=candidate.category,
        fiber_per_100g=candidate.fiber_per_100g,
        sugar_per_100g=candidate.sugar_per_100g,
        brand=candidate.brand,
    )

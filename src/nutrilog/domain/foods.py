"""Domain models for catalog foods and food candidates."""

import re
import time
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from pydantic import BaseModel

CANONICAL_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class SourceTag(str, Enum):
    """Placeholder prefixes for foods that are not catalog rows."""

    RECOGNITION = "gemini_"
    SEARCH = "search_"
    FALLBACK = "fallback_"
    CUSTOM = "custom_"

    def mint(self, index: int | None = None) -> str:
        """Return a new local identifier carrying this prefix."""
        stamp = int(time.time() * 1000)
        if index is None:
            return f"{self.value}{stamp}"
        return f"{self.value}{stamp}_{index}"


@dataclass(frozen=True)
class PersistedId:
    """Identifier of a row that already exists in the catalog."""

    catalog_id: UUID

    def __str__(self) -> str:
        return str(self.catalog_id)


@dataclass(frozen=True)
class TransientId:
    """Identifier of a food that only exists on the client."""

    source: SourceTag | None
    token: str

    def __str__(self) -> str:
        prefix = self.source.value if self.source else ""
        return f"{prefix}{self.token}"


FoodId = PersistedId | TransientId


def is_canonical_id(value: str | None) -> bool:
    """Return True when the value is a hyphenated 36-character catalog id."""
    if not value:
        return False
    return CANONICAL_ID_PATTERN.match(value) is not None


def parse_food_id(raw: str) -> FoodId:
    """Classify a raw food id as persisted or transient."""
    source = next((tag for tag in SourceTag if raw.startswith(tag.value)), None)
    if source is None and is_canonical_id(raw):
        return PersistedId(UUID(raw))
    if source is None:
        return TransientId(source=None, token=raw)
    return TransientId(source=source, token=raw[len(source.value) :])


@dataclass(frozen=True)
class FoodItem:
    """Nutrient record persisted in the shared food catalog."""

    id: UUID
    name: str
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    category: str
    fiber_per_100g: float | None = None
    sugar_per_100g: float | None = None
    brand: str | None = None


class FoodCandidate(BaseModel):
    """A food selected by the user that may not be in the catalog yet."""

    id: str
    name: str
    calories_per_100g: float
    protein_per_100g: float = 0.0
    carbs_per_100g: float = 0.0
    fat_per_100g: float = 0.0
    fiber_per_100g: float | None = None
    sugar_per_100g: float | None = None
    category: str = "Unknown"
    brand: str | None = None

    @property
    def food_id(self) -> FoodId:
        """Return the classified identifier."""
        return parse_food_id(self.id)

    def catalog_payload(self) -> dict[str, object]:
        """Return the row to insert when promoting this candidate."""
        return {
            "name": self.name,
            "calories_per_100g": self.calories_per_100g,
            "protein_per_100g": self.protein_per_100g,
            "carbs_per_100g": self.carbs_per_100g,
            "fat_per_100g": self.fat_per_100g,
            "fiber_per_100g": self.fiber_per_100g or None,
            "sugar_per_100g": self.sugar_per_100g or None,
            "category": self.category,
            "brand": self.brand or None,
        }

    @classmethod
    def from_item(cls, item: FoodItem) -> "FoodCandidate":
        """Build a candidate that points at an existing catalog row."""
        return cls(
            id=str(item.id),
            name=item.name,
            calories_per_100g=item.calories_per_100g,
            protein_per_100g=item.protein_per_100g,
            carbs_per_100g=item.carbs_per_100g,
            fat_per_100g=item.fat_per_100g,
            fiber_per_100g=item.fiber_per_100g,
            sugar_per_100g=item.sugar_per_100g,
            category=item.category,
            brand=item.brand,
        )

"""Services for the shared food catalog."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrilog.domain.foods import FoodItem


class CatalogRepository(Protocol):
    """Persistence interface for catalog foods."""

    def get_food(self, food_id: UUID) -> FoodItem | None:
        """Return a catalog food by id, if present."""

    def find_food_id(self, name: str, calories_per_100g: float) -> str | None:
        """Return the id of a row matching name and calories exactly."""

    def insert_food(self, payload: dict[str, object]) -> str:
        """Insert a catalog row and return the assigned id."""

    def search_by_name(self, query: str, limit: int) -> list[FoodItem]:
        """Return foods whose name contains the query, case-insensitively."""


@dataclass
class CatalogService:
    """Application service for catalog reads."""

    repository: CatalogRepository

    def search(self, query: str | None, limit: int = 10) -> list[FoodItem]:
        """Search catalog foods by name."""
        if not query or not query.strip():
            return []
        return self.repository.search_by_name(query.strip(), limit)

    def get_food(self, food_id: UUID) -> FoodItem | None:
        """Return a catalog food by id."""
        return self.repository.get_food(food_id)

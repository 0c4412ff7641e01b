"""Supabase implementation for the food catalog."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from nutrilog.domain.foods import FoodItem
from nutrilog.errors import CatalogError
from nutrilog.services.catalog import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed repository for catalog foods."""

    client: Client

    def get_food(self, food_id: UUID) -> FoodItem | None:
        """Return a catalog food by id, if present."""
        try:
            response = (
                self.client.table("food_items")
                .select("*")
                .eq("id", str(food_id))
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise CatalogError("Failed to load food item") from exc
        if not response.data:
            return None
        return parse_food_item(response.data[0])

    def find_food_id(self, name: str, calories_per_100g: float) -> str | None:
        """Return the id of the first row with this exact name and calories."""
        try:
            response = (
                self.client.table("food_items")
                .select("id")
                .eq("name", name)
                .eq("calories_per_100g", calories_per_100g)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise CatalogError("Failed to search for food in database") from exc
        if not response.data:
            return None
        return str(response.data[0].get("id") or "") or None

    def insert_food(self, payload: dict[str, object]) -> str:
        """Insert a catalog row and return its id."""
        try:
            response = self.client.table("food_items").insert(payload).execute()
        except APIError as exc:
            raise CatalogError("Failed to save food item to database") from exc
        if not response.data:
            raise CatalogError("Failed to save food item to database")
        return str(response.data[0].get("id") or "")

    def search_by_name(self, query: str, limit: int) -> list[FoodItem]:
        """Search foods by name."""
        try:
            response = (
                self.client.table("food_items")
                .select("*")
                .ilike("name", f"%{query}%")
                .order("name", desc=False)
                .limit(limit)
                .execute()
            )
        except APIError as exc:
            raise CatalogError("Failed to search food") from exc
        return [parse_food_item(row) for row in response.data or []]


def parse_food_item(row: dict[str, object]) -> FoodItem:
    """Parse a catalog row into a domain model."""
    return FoodItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        calories_per_100g=float(row.get("calories_per_100g") or 0.0),
        protein_per_100g=float(row.get("protein_per_100g") or 0.0),
        carbs_per_100g=float(row.get("carbs_per_100g") or 0.0),
        fat_per_100g=float(row.get("fat_per_100g") or 0.0),
        category=str(row.get("category") or "Unknown"),
        fiber_per_100g=_optional_float(row.get("fiber_per_100g")),
        sugar_per_100g=_optional_float(row.get("sugar_per_100g")),
        brand=row.get("brand"),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)

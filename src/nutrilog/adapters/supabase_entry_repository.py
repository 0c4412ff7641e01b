"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from nutrilog.adapters.supabase_catalog_repository import parse_food_item
from nutrilog.domain.entries import FoodEntry, MealType
from nutrilog.errors import EntryPersistenceError
from nutrilog.services.entries import FoodEntryRepository


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for food entries."""

    client: Client

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
        """Insert an entry row and return it."""
        try:
            response = (
                self.client.table("food_entries")
                .insert(
                    {
                        "user_id": str(user_id),
                        "food_item_id": str(food_item_id),
                        "quantity": quantity,
                        "meal_type": meal_type.value,
                        "logged_at": logged_at.isoformat(),
                        "photo_url": photo_url,
                        "notes": notes,
                    }
                )
                .execute()
            )
        except APIError as exc:
            raise EntryPersistenceError("Failed to log food entry") from exc
        if not response.data:
            raise EntryPersistenceError("Failed to log food entry")
        return _parse_entry(response.data[0])

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime | None = None
    ) -> list[FoodEntry]:
        """Return entries with their foods in the time range, newest first."""
        query = (
            self.client.table("food_entries")
            .select("*, food_item:food_items(*)")
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
        )
        if end is not None:
            query = query.lt("logged_at", end.isoformat())
        try:
            response = query.order("logged_at", desc=True).execute()
        except APIError as exc:
            raise EntryPersistenceError("Failed to load food entries") from exc
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> FoodEntry:
    food_row = row.get("food_item")
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_item_id=UUID(str(row["food_item_id"])),
        quantity=int(row.get("quantity") or 0),
        meal_type=MealType(row.get("meal_type") or MealType.LUNCH.value),
        logged_at=_parse_timestamp(row.get("logged_at")),
        photo_url=row.get("photo_url"),
        notes=row.get("notes"),
        food_item=parse_food_item(food_row) if isinstance(food_row, dict) else None,
    )


def _parse_timestamp(raw: object) -> datetime:
    if not isinstance(raw, str) or not raw:
        return datetime.min.replace(tzinfo=UTC)
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed

"""Supabase repository for daily goals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from nutrilog.domain.goals import DailyGoal
from nutrilog.errors import NutrilogError
from nutrilog.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for daily goals."""

    client: Client

    def get_goal(self, user_id: UUID) -> DailyGoal | None:
        """Return the stored goal row for a user."""
        try:
            response = (
                self.client.table("daily_goals")
                .select("daily_calories, daily_protein, daily_carbs, daily_fat")
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise NutrilogError("Failed to load profile") from exc
        if not response.data:
            return None
        row = response.data[0]
        return DailyGoal(
            daily_calories=int(row.get("daily_calories") or 0),
            daily_protein=int(row.get("daily_protein") or 0),
            daily_carbs=int(row.get("daily_carbs") or 0),
            daily_fat=int(row.get("daily_fat") or 0),
        )

    def upsert_goal(self, user_id: UUID, goal: DailyGoal, updated_at: datetime) -> None:
        """Insert or update the goal row keyed by user."""
        try:
            self.client.table("daily_goals").upsert(
                {
                    "user_id": str(user_id),
                    "daily_calories": goal.daily_calories,
                    "daily_protein": goal.daily_protein,
                    "daily_carbs": goal.daily_carbs,
                    "daily_fat": goal.daily_fat,
                    "updated_at": updated_at.isoformat(),
                },
                on_conflict="user_id",
            ).execute()
        except APIError as exc:
            raise NutrilogError("Failed to save profile") from exc

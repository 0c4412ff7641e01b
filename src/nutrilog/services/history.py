"""Dashboard and history aggregation for food entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrilog.domain.entries import ZERO_TOTALS, FoodEntry, NutrientTotals
from nutrilog.domain.history import (
    DayGroup,
    HistoryPeriod,
    HistorySummary,
    TodaySummary,
)
from nutrilog.services.entries import FoodEntryRepository
from nutrilog.services.goals import GoalService


@dataclass
class HistoryService:
    """Service for computing entry totals in the user's timezone."""

    repository: FoodEntryRepository
    goal_service: GoalService

    def get_today(self, user_id: UUID, timezone_name: str) -> TodaySummary:
        """Return today's entries, totals and calorie goal progress."""
        tz = ZoneInfo(timezone_name)
        now = datetime.now(tz=tz)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        entries = self.repository.list_entries(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        today = [
            entry
            for entry in _newest_first(entries)
            if _local_day(entry, tz) == start.date()
        ]
        totals = _sum_nutrients(today)
        calorie_goal = self.goal_service.get_goals(user_id).daily_calories
        progress = 0.0
        if calorie_goal > 0:
            progress = min(totals.calories / calorie_goal * 100, 100.0)
        return TodaySummary(
            day=start.date(),
            entries=today,
            totals=totals,
            calorie_goal=calorie_goal,
            progress_percent=progress,
        )

    def get_history(
        self, user_id: UUID, period: HistoryPeriod, timezone_name: str
    ) -> HistorySummary:
        """Return entries for the period grouped by local day."""
        tz = ZoneInfo(timezone_name)
        entries = self.get_recent_entries(user_id, days=period.days)
        groups: dict[date, list[FoodEntry]] = {}
        for entry in entries:
            groups.setdefault(_local_day(entry, tz), []).append(entry)

        days = [
            DayGroup(day=day, entries=items, calories=_sum_nutrients(items).calories)
            for day, items in groups.items()
        ]
        total_calories = sum(group.calories for group in days)
        average = total_calories / len(days) if days else 0.0
        return HistorySummary(
            period=period,
            days=days,
            total_calories=total_calories,
            average_calories=average,
        )

    def get_recent_entries(self, user_id: UUID, days: int = 7) -> list[FoodEntry]:
        """Return entries logged in the last `days` days, newest first."""
        start = datetime.now(tz=UTC) - timedelta(days=days)
        return _newest_first(self.repository.list_entries(user_id, start))


def _local_day(entry: FoodEntry, tz: ZoneInfo) -> date:
    return entry.logged_at.astimezone(tz).date()


def _newest_first(entries: list[FoodEntry]) -> list[FoodEntry]:
    return sorted(entries, key=lambda entry: entry.logged_at, reverse=True)


def _sum_nutrients(entries: list[FoodEntry]) -> NutrientTotals:
    total = ZERO_TOTALS
    for entry in entries:
        total = total + entry.nutrients
    return total

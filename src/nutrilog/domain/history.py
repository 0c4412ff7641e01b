"""Domain models for dashboard and history views."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from nutrilog.domain.entries import FoodEntry, NutrientTotals


class HistoryPeriod(str, Enum):
    """Look-back window for the history view."""

    WEEK = "week"
    MONTH = "month"

    @property
    def days(self) -> int:
        return 7 if self is HistoryPeriod.WEEK else 30


@dataclass(frozen=True)
class TodaySummary:
    """Entries and totals for the current local day."""

    day: date
    entries: list[FoodEntry]
    totals: NutrientTotals
    calorie_goal: int
    progress_percent: float


@dataclass(frozen=True)
class DayGroup:
    """Entries logged on one local day."""

    day: date
    entries: list[FoodEntry]
    calories: float


@dataclass(frozen=True)
class HistorySummary:
    """Entries over a period grouped by day."""

    period: HistoryPeriod
    days: list[DayGroup]
    total_calories: float
    average_calories: float

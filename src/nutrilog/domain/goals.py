"""Daily nutrition goal models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyGoal:
    """Per-user daily nutrition targets."""

    daily_calories: int
    daily_protein: int
    daily_carbs: int
    daily_fat: int


DEFAULT_DAILY_GOAL = DailyGoal(
    daily_calories=2000,
    daily_protein=150,
    daily_carbs=250,
    daily_fat=67,
)

"""Daily goal service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutrilog.domain.goals import DEFAULT_DAILY_GOAL, DailyGoal
from nutrilog.errors import InputValidationError, NutrilogError

_logger = logging.getLogger(__name__)


class GoalRepository(Protocol):
    """Persistence interface for daily goals."""

    def get_goal(self, user_id: UUID) -> DailyGoal | None:
        """Return the user's goal row, if present."""

    def upsert_goal(self, user_id: UUID, goal: DailyGoal, updated_at: datetime) -> None:
        """Insert or replace the user's goal row."""


@dataclass
class GoalService:
    """Service for reading and saving daily goals."""

    repository: GoalRepository

    def get_goals(self, user_id: UUID) -> DailyGoal:
        """Return stored goals, or the defaults when none can be read."""
        try:
            goal = self.repository.get_goal(user_id)
        except NutrilogError:
            _logger.warning("Goal lookup failed, using defaults: user_id=%s", user_id)
            return DEFAULT_DAILY_GOAL
        return goal or DEFAULT_DAILY_GOAL

    def save_goals(self, user_id: UUID, goal: DailyGoal) -> DailyGoal:
        """Persist goals for a user."""
        values = (
            goal.daily_calories,
            goal.daily_protein,
            goal.daily_carbs,
            goal.daily_fat,
        )
        if any(value < 0 for value in values):
            raise InputValidationError("Goals must not be negative")
        self.repository.upsert_goal(user_id, goal, updated_at=datetime.now(tz=UTC))
        return goal

"""User-facing API endpoints."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from nutrilog.api.schemas import (  # noqa: TC001
    CustomFoodRequest,
    GoalsRequest,
    LogEntryRequest,
    RecognizeRequest,
)
from nutrilog.domain.foods import FoodCandidate
from nutrilog.domain.goals import DailyGoal
from nutrilog.domain.history import HistoryPeriod
from nutrilog.errors import FoodSearchError, InputValidationError
from nutrilog.services.entries import FoodEntryService
from nutrilog.services.food_ai import fallback_recognition

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer
    from nutrilog.domain.entries import FoodEntry

router = APIRouter(tags=["nutrition"])
logger = logging.getLogger(__name__)


async def require_user(x_user_id: str | None = Header(default=None)) -> UUID:
    """Return the caller's user id from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from None


@router.get("/foods/search")
async def search_foods(
    request: Request, q: str = "", user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Search the catalog and ask the model for matching foods."""
    container: AppContainer = request.app.state.container
    catalog = container.catalog_service.search(q)
    outcome = await container.food_ai_service.search_foods(q)
    if not outcome.ok and not catalog:
        raise FoodSearchError("Failed to search food")
    return {
        "catalog": [FoodCandidate.from_item(item).model_dump() for item in catalog],
        "suggestions": [item.model_dump() for item in outcome.items],
        "search_failed": not outcome.ok,
    }


@router.post("/foods/recognize")
async def recognize_food(
    body: RecognizeRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Suggest foods for a photo."""
    container: AppContainer = request.app.state.container
    if body.image_base64:
        image_bytes = _decode_image(body.image_base64)
    elif body.image_url:
        try:
            image_bytes = await container.image_fetcher.fetch_bytes(body.image_url)
        except (httpx.HTTPError, RuntimeError):
            logger.exception("Failed to download photo", extra={"url": body.image_url})
            return fallback_recognition().model_dump()
    else:
        raise InputValidationError("Please provide a photo")
    result = await container.food_ai_service.recognize_food(image_bytes)
    return result.model_dump()


@router.post("/foods/custom")
async def create_custom_food(
    body: CustomFoodRequest, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Build a custom food candidate from form values."""
    candidate = FoodEntryService.create_custom_food(
        name=body.name,
        calories_per_100g=body.calories_per_100g,
        protein_per_100g=body.protein_per_100g,
        carbs_per_100g=body.carbs_per_100g,
        fat_per_100g=body.fat_per_100g,
        category=body.category,
    )
    return candidate.model_dump()


@router.post("/entries", status_code=status.HTTP_201_CREATED)
async def log_entry(
    body: LogEntryRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Log a food entry, adding the food to the catalog if needed."""
    container: AppContainer = request.app.state.container
    entry = container.entry_service.log_food(
        user_id=user_id,
        candidate=_selected_food(body.food),
        quantity=body.quantity,
        meal_type=body.meal_type,
        photo_url=body.photo_url,
        notes=body.notes,
    )
    return {"message": "Food logged successfully!", "entry": _entry_payload(entry)}


@router.get("/entries/today")
async def today(
    request: Request, tz: str | None = None, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return today's entries and progress."""
    container: AppContainer = request.app.state.container
    summary = container.history_service.get_today(
        user_id, _resolve_timezone(tz or container.settings.default_timezone)
    )
    return {
        "day": summary.day,
        "entries": [_entry_payload(entry) for entry in summary.entries],
        "totals": asdict(summary.totals),
        "calorie_goal": summary.calorie_goal,
        "progress_percent": summary.progress_percent,
    }


@router.get("/entries/history")
async def history(
    request: Request,
    period: HistoryPeriod = HistoryPeriod.WEEK,
    tz: str | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return entries for the last week or month grouped by day."""
    container: AppContainer = request.app.state.container
    summary = container.history_service.get_history(
        user_id, period, _resolve_timezone(tz or container.settings.default_timezone)
    )
    return {
        "period": summary.period.value,
        "total_calories": summary.total_calories,
        "average_calories": summary.average_calories,
        "days": [
            {
                "day": group.day,
                "calories": group.calories,
                "entries": [_entry_payload(entry) for entry in group.entries],
            }
            for group in summary.days
        ],
    }


@router.get("/goals")
async def get_goals(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's daily goals."""
    container: AppContainer = request.app.state.container
    return asdict(container.goal_service.get_goals(user_id))


@router.put("/goals")
async def save_goals(
    body: GoalsRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Save the caller's daily goals."""
    container: AppContainer = request.app.state.container
    goal = container.goal_service.save_goals(
        user_id,
        DailyGoal(
            daily_calories=body.daily_calories,
            daily_protein=body.daily_protein,
            daily_carbs=body.daily_carbs,
            daily_fat=body.daily_fat,
        ),
    )
    return asdict(goal)


@router.get("/advice")
async def advice(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return personalised advice from goals and the last week of entries."""
    container: AppContainer = request.app.state.container
    goals = container.goal_service.get_goals(user_id)
    recent = container.history_service.get_recent_entries(user_id, days=7)
    result = await container.food_ai_service.get_advice(goals, recent)
    return result.model_dump()


def _selected_food(raw: dict[str, object] | None) -> FoodCandidate | None:
    if raw is None:
        return None
    try:
        return FoodCandidate.model_validate(raw)
    except ValidationError as exc:
        raise InputValidationError("Please select a food item") from exc


def _entry_payload(entry: FoodEntry) -> dict[str, object]:
    payload = asdict(entry)
    payload["meal_type"] = entry.meal_type.value
    payload["nutrients"] = asdict(entry.nutrients)
    return payload


def _decode_image(encoded: str) -> bytes:
    _, _, data = encoded.rpartition(",")
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InputValidationError("Failed to analyze image") from exc


def _resolve_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InputValidationError(
            "Please send a valid timezone like America/Los_Angeles."
        ) from exc
    return value

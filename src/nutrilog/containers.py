"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrilog.adapters.image_fetcher import HttpxImageFetcher, ImageFetcher
from nutrilog.adapters.openai_text_client import OpenAITextClient
from nutrilog.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from nutrilog.adapters.supabase_entry_repository import SupabaseFoodEntryRepository
from nutrilog.adapters.supabase_goal_repository import SupabaseGoalRepository
from nutrilog.config import Settings
from nutrilog.services.catalog import CatalogService
from nutrilog.services.entries import FoodEntryService
from nutrilog.services.food_ai import FoodAIService
from nutrilog.services.goals import GoalService
from nutrilog.services.history import HistoryService
from nutrilog.services.reconciliation import FoodReconciler


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    image_fetcher: ImageFetcher
    catalog_service: CatalogService
    food_ai_service: FoodAIService
    entry_service: FoodEntryService
    history_service: HistoryService
    goal_service: GoalService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    entry_repository = SupabaseFoodEntryRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    image_fetcher = HttpxImageFetcher.create(resolved_settings.image_fetch_timeout)
    food_ai_service = FoodAIService(
        client=OpenAITextClient.create(resolved_settings.openai_api_key),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    goal_service = GoalService(goal_repository)
    entry_service = FoodEntryService(
        reconciler=FoodReconciler(catalog_repository),
        repository=entry_repository,
    )
    history_service = HistoryService(
        repository=entry_repository,
        goal_service=goal_service,
    )

    async def close_resources() -> None:
        await image_fetcher.close()

    return AppContainer(
        settings=resolved_settings,
        image_fetcher=image_fetcher,
        catalog_service=CatalogService(catalog_repository),
        food_ai_service=food_ai_service,
        entry_service=entry_service,
        history_service=history_service,
        goal_service=goal_service,
        close_resources=close_resources,
    )

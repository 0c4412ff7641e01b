"""Tests for container wiring."""

import asyncio

from nutrilog.adapters.image_fetcher import HttpxImageFetcher
from nutrilog.adapters.openai_text_client import OpenAITextClient
from nutrilog.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from nutrilog.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.image_fetcher, HttpxImageFetcher)
    assert isinstance(container.food_ai_service.client, OpenAITextClient)
    assert container.food_ai_service.model == "gpt-4o-mini"
    assert isinstance(container.catalog_service.repository, SupabaseCatalogRepository)
    assert container.entry_service.reconciler.repository is (
        container.catalog_service.repository
    )
    assert container.history_service.goal_service is container.goal_service
    asyncio.run(container.close_resources())

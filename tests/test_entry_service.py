"""Tests for food entry logging."""

import re
from uuid import UUID, uuid4

import pytest

from nutrilog.domain.entries import MealType
from nutrilog.domain.foods import FoodCandidate
from nutrilog.errors import EntryPersistenceError, InputValidationError
from nutrilog.services.entries import (
    FoodEntryService,
    parse_lenient_float,
    parse_quantity,
)
from nutrilog.services.reconciliation import FoodReconciler
from tests.conftest import InMemoryCatalogRepository, InMemoryFoodEntryRepository


SOUP = FoodCandidate(id="custom_1", name="Soup", calories_per_100g=10)


def _service() -> tuple[
    FoodEntryService, InMemoryCatalogRepository, InMemoryFoodEntryRepository
]:
    catalog = InMemoryCatalogRepository()
    entries = InMemoryFoodEntryRepository(catalog=catalog)
    return FoodEntryService(FoodReconciler(catalog), entries), catalog, entries


def test_logging_ai_suggestion_inserts_food_then_entry() -> None:
    service, catalog, entries = _service()
    user_id = uuid4()

    entry = service.log_food(
        user_id=user_id,
        candidate=FoodCandidate(
            id="gemini_1700000000_0",
            name="Grilled Chicken",
            calories_per_100g=165,
            protein_per_100g=31,
            fat_per_100g=3.6,
            category="Proteins",
        ),
        quantity="200",
        meal_type="dinner",
    )

    assert catalog.calls.count("insert_food") == 1
    assert len(entries.entries) == 1
    assert str(entry.food_item_id) in catalog.rows
    assert entry.quantity == 200
    assert entry.meal_type is MealType.DINNER
    assert entry.nutrients.calories == 330
    assert entry.nutrients.protein_g == 62


def test_logging_catalog_food_skips_catalog() -> None:
    service, catalog, entries = _service()
    raw = "a1b2c3d4-e5f6-4a1b-8c2d-1234567890ab"

    entry = service.log_food(
        user_id=uuid4(),
        candidate=FoodCandidate(id=raw, name="Apple", calories_per_100g=52),
        quantity=100,
    )

    assert catalog.calls == []
    assert entry.food_item_id == UUID(raw)
    assert entry.meal_type is MealType.LUNCH
    assert entries.entries[0].food_item_id == UUID(raw)


@pytest.mark.parametrize(
    ("candidate", "quantity", "meal_type"),
    [
        (None, 100, "lunch"),
        (FoodCandidate(id="custom_1", name="  ", calories_per_100g=10), 100, "lunch"),
        (SOUP, 0, "lunch"),
        (SOUP, "abc", "lunch"),
        (SOUP, -5, "lunch"),
        (SOUP, 100, "brunch"),
    ],
)
def test_validation_happens_before_any_catalog_call(
    candidate, quantity, meal_type
) -> None:
    service, catalog, entries = _service()

    with pytest.raises(InputValidationError):
        service.log_food(
            user_id=uuid4(),
            candidate=candidate,
            quantity=quantity,
            meal_type=meal_type,
        )

    assert catalog.calls == []
    assert entries.entries == []


def test_entry_failure_keeps_inserted_catalog_row() -> None:
    service, catalog, entries = _service()
    entries.fail_insert = True

    with pytest.raises(EntryPersistenceError):
        service.log_food(
            user_id=uuid4(),
            candidate=FoodCandidate(
                id="search_1700000000_2", name="Lentils", calories_per_100g=116
            ),
            quantity=150,
        )

    assert len(catalog.rows) == 1


def test_create_custom_food_parses_form_values() -> None:
    candidate = FoodEntryService.create_custom_food(
        name="Grandma's Stew",
        calories_per_100g="120.5kcal",
        protein_per_100g="8",
        carbs_per_100g="",
        fat_per_100g="n/a",
        category=None,
    )

    assert re.fullmatch(r"custom_\d+", candidate.id)
    assert candidate.calories_per_100g == 120.5
    assert candidate.protein_per_100g == 8
    assert candidate.carbs_per_100g == 0
    assert candidate.fat_per_100g == 0
    assert candidate.category == "Unknown"


@pytest.mark.parametrize(
    ("name", "calories"), [("", "100"), ("   ", "100"), ("Stew", ""), ("Stew", None)]
)
def test_create_custom_food_requires_name_and_calories(name, calories) -> None:
    with pytest.raises(InputValidationError):
        FoodEntryService.create_custom_food(name=name, calories_per_100g=calories)


def test_parse_quantity_reads_leading_digits() -> None:
    assert parse_quantity("150g") == 150
    assert parse_quantity(" 75 ") == 75
    assert parse_quantity(99.9) == 99
    assert parse_quantity("g150") is None
    assert parse_quantity(True) is None
    assert parse_quantity(None) is None


def test_parse_lenient_float() -> None:
    assert parse_lenient_float("3.5g") == 3.5
    assert parse_lenient_float(".5") == 0.5
    assert parse_lenient_float("abc") == 0.0
    assert parse_lenient_float(float("nan")) == 0.0
    assert parse_lenient_float(None) == 0.0

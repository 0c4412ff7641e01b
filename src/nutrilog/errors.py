"""Errors surfaced to API callers as alerts."""


class NutrilogError(Exception):
    """Base error carrying a static user-facing message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(NutrilogError):
    """Required input is missing or malformed."""

    status_code = 422


class CatalogError(NutrilogError):
    """Catalog lookup or insert failed."""

    status_code = 502


class FoodResolutionError(NutrilogError):
    """A candidate could not be resolved to a catalog id."""

    status_code = 502


class EntryPersistenceError(NutrilogError):
    """Entry insert failed."""

    status_code = 502


class FoodSearchError(NutrilogError):
    """AI food search produced no usable result."""

    status_code = 502

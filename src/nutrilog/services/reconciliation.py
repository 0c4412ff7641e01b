"""Food-identity reconciliation against the catalog."""

import logging
from dataclasses import dataclass
from uuid import UUID

from nutrilog.domain.foods import FoodCandidate, PersistedId, is_canonical_id
from nutrilog.errors import FoodResolutionError
from nutrilog.services.catalog import CatalogRepository

_logger = logging.getLogger(__name__)


@dataclass
class FoodReconciler:
    """Resolves a food candidate to exactly one catalog id.

    Candidates that already carry a catalog id are returned as-is without
    touching the repository. Anything else is matched against the catalog by
    exact name and calories, and inserted when no row matches. Inserted rows
    are kept even if a later step fails.
    """

    repository: CatalogRepository

    def resolve(self, candidate: FoodCandidate) -> UUID:
        """Return the catalog id for the candidate, promoting it if needed."""
        food_id = candidate.food_id
        if isinstance(food_id, PersistedId):
            return food_id.catalog_id

        _logger.info(
            "Resolving transient food: id=%s source=%s name=%s",
            candidate.id,
            food_id.source.name if food_id.source else "untagged",
            candidate.name,
        )
        resolved = self.repository.find_food_id(
            candidate.name, candidate.calories_per_100g
        )
        if resolved:
            _logger.info("Reusing catalog food: id=%s", resolved)
        else:
            resolved = self.repository.insert_food(candidate.catalog_payload())
            _logger.info("Created catalog food: id=%s", resolved)

        if not is_canonical_id(resolved):
            _logger.error(
                "Invalid catalog id after resolution: resolved=%s candidate=%s",
                resolved,
                candidate.id,
            )
            raise FoodResolutionError(
                "Failed to get valid food item ID. "
                "Please try selecting the food again."
            )
        return UUID(resolved)

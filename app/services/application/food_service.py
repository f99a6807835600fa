from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.constants import WEIGHT_SENSOR_TYPE
from app.domain.exceptions import BadRequestError, NotFoundError
from app.services.utilities.nutrition_client import NutritionClient
from infrastructure.database.repositories.sensors import SensorRepository

logger = logging.getLogger(__name__)


@dataclass
class FoodService:
    """Food search and nutrition analysis through the nutrition API."""

    client: NutritionClient
    sensor_repo: SensorRepository

    def search(self, name: Optional[str]) -> Dict[str, Any]:
        if not name or not name.strip():
            raise BadRequestError("Query parameter 'name' is required", errors={"name": ["Required"]})
        data = self.client.search_food(name.strip())
        if not data.get("hints"):
            raise NotFoundError(f"No foods found for '{name.strip()}'")
        return data

    def nutrition(self, ingredients: List[str], *, title: Optional[str] = None) -> Dict[str, Any]:
        """Analyse *ingredients*, each measured in the unit of the weight sensor."""
        sensor_type = self.sensor_repo.get_type_by_name(WEIGHT_SENSOR_TYPE)
        if sensor_type is None:
            raise BadRequestError(f"Sensor type '{WEIGHT_SENSOR_TYPE}' is not configured")
        unit = sensor_type["unit"]
        lines = [f"{ingredient} {unit}".strip() for ingredient in ingredients]
        logger.debug("Requesting nutrition analysis for %d ingredient(s)", len(lines))
        return self.client.nutrition_details(lines, title=title)

"""
Gateway Service
===============
Reads and publishes through the broker gateway: raw retained messages,
per-sensor reading shortcuts, the bracelet screen selector and the
step / distance goal comparisons.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from app.constants import Goals, Topics
from app.domain.exceptions import BadRequestError, NotFoundError
from app.domain.retained import GoalComparison, decode_retained_payload
from app.enums.device import GatewayMetric, GoalKind
from app.services.application.configuration_service import ConfigurationService
from app.services.utilities.broker_gateway import BrokerGatewayClient
from infrastructure.database.repositories.sensors import SensorRepository

logger = logging.getLogger(__name__)


@dataclass
class GatewayService:
    broker: BrokerGatewayClient
    sensor_repo: SensorRepository
    configuration_service: ConfigurationService

    def read_retained(self, topic: str) -> Any:
        """Return the decoded retained message published on *topic*."""
        record = self.broker.get_retained_message(topic)
        return decode_retained_payload(record.get("payload"))

    def publish(self, topic: str, message: str) -> Any:
        data = self.broker.publish(topic, message)
        logger.info("Published message to topic '%s'", topic)
        return data

    def set_screen(self, value: Any) -> Any:
        """Switch the bracelet screen to page *value* (1-4)."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise BadRequestError(
                "Screen value must be an integer",
                errors={"value": ["Must be an integer between 1 and 4"]},
            )
        if not Topics.SCREEN_MIN <= value <= Topics.SCREEN_MAX:
            raise BadRequestError(
                f"Screen value must be between {Topics.SCREEN_MIN} and {Topics.SCREEN_MAX}",
                errors={"value": [f"Must be between {Topics.SCREEN_MIN} and {Topics.SCREEN_MAX}"]},
            )
        return self.publish(Topics.SCREEN, str(value))

    def read_metric(self, metric: str) -> Dict[str, Any]:
        """Return the latest reading of *metric* with the unit of its sensor type."""
        try:
            gateway_metric = GatewayMetric(metric)
        except ValueError:
            raise NotFoundError(f"Unknown reading '{metric}'") from None

        unit = self._sensor_unit(gateway_metric)
        reading = self.read_retained(Topics.READINGS[gateway_metric])
        return {"retained_message": reading, "unit": unit}

    def compare_goal(self, user_id: int, kind: GoalKind) -> GoalComparison:
        """Compare the live reading for *kind* against the user's stored goal."""
        unit = self._sensor_unit(Goals.METRICS[kind])
        reading = self.read_retained(Goals.TOPICS[kind])
        configuration = self.configuration_service.find_user_goal(user_id, Goals.CONFIGURATION_TYPES[kind])
        comparison = GoalComparison(reading=reading, goal=configuration["data"], unit=unit)
        logger.debug("Goal %s for user %s reached=%s", kind.value, user_id, comparison.reached)
        return comparison

    def _sensor_unit(self, metric: GatewayMetric) -> str:
        sensor_type_name = Topics.SENSOR_TYPES[metric]
        sensor_type = self.sensor_repo.get_type_by_name(sensor_type_name)
        if sensor_type is None:
            raise NotFoundError(f"Sensor type '{sensor_type_name}' is not configured")
        return sensor_type["unit"]

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.domain.exceptions import ConflictError, NotFoundError, ValidationError
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.sensors import SensorRepository

logger = logging.getLogger(__name__)


@dataclass
class SensorService:
    """Sensors attached to devices, and the sensor types they measure."""

    repository: SensorRepository
    device_repo: DeviceRepository

    # --- Sensor types ----------------------------------------------------------
    def list_types(self) -> List[Dict[str, Any]]:
        return self.repository.list_types()

    def get_type(self, type_id: int) -> Dict[str, Any]:
        row = self.repository.get_type(type_id)
        if row is None:
            raise NotFoundError(f"Sensor type {type_id} not found")
        return row

    def get_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self.repository.get_type_by_name(name)

    def create_type(self, *, name: str, unit: str) -> Dict[str, Any]:
        if self.repository.get_type_by_name(name) is not None:
            raise ConflictError(f"Sensor type '{name}' already exists")
        return self.get_type(self.repository.create_type(name=name, unit=unit))

    def update_type(self, type_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_type(type_id)
        name = fields.get("name")
        if name is not None:
            existing = self.repository.get_type_by_name(name)
            if existing is not None and existing["id"] != type_id:
                raise ConflictError(f"Sensor type '{name}' already exists")
        self.repository.update_type(type_id, fields)
        return self.get_type(type_id)

    def delete_type(self, type_id: int) -> Dict[str, Any]:
        row = self.get_type(type_id)
        if self.repository.type_in_use(type_id):
            raise ConflictError("Sensor type is still used by sensors")
        self.repository.delete_type(type_id)
        return row

    # --- Sensors ---------------------------------------------------------------
    def list_sensors(self, device_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self.repository.list_sensors(device_id)

    def get_sensor(self, sensor_id: int) -> Dict[str, Any]:
        sensor = self.repository.get_sensor(sensor_id)
        if sensor is None:
            raise NotFoundError(f"Sensor {sensor_id} not found")
        return sensor

    def create_sensor(
        self,
        *,
        device_id: int,
        sensor_type_id: int,
        value: float,
        active: int = 1,
    ) -> Dict[str, Any]:
        errors: Dict[str, List[str]] = {}
        if self.device_repo.get_device(device_id) is None:
            errors["device_id"] = [f"Device {device_id} does not exist"]
        if self.repository.get_type(sensor_type_id) is None:
            errors["sensor_type_id"] = [f"Sensor type {sensor_type_id} does not exist"]
        if errors:
            raise ValidationError("Invalid sensor references", errors=errors)

        sensor_id = self.repository.create_sensor(
            device_id=device_id,
            sensor_type_id=sensor_type_id,
            value=value,
            active=active,
        )
        return self.get_sensor(sensor_id)

    def update_sensor(self, sensor_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_sensor(sensor_id)
        self.repository.update_sensor(sensor_id, fields)
        return self.get_sensor(sensor_id)

    def toggle_sensor(self, sensor_id: int) -> Dict[str, Any]:
        self.get_sensor(sensor_id)
        self.repository.toggle_sensor(sensor_id)
        sensor = self.get_sensor(sensor_id)
        logger.info("Sensor %s is now %s", sensor_id, "active" if sensor["active"] else "inactive")
        return sensor

    def delete_sensor(self, sensor_id: int) -> Dict[str, Any]:
        sensor = self.get_sensor(sensor_id)
        self.repository.delete_sensor(sensor_id)
        return sensor

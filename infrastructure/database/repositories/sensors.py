from __future__ import annotations

from typing import Any, Dict, List, Optional

from infrastructure.database.ops.sensors import SensorOperations


def _shape_sensor(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    sensor = dict(row)
    sensor["active"] = int(sensor["active"])
    sensor["sensor_type"] = {
        "id": sensor["sensor_type_id"],
        "name": sensor.pop("sensor_type_name", None),
        "unit": sensor.pop("sensor_type_unit", None),
    }
    return sensor


class SensorRepository:
    """Facade over sensor and sensor type persistence."""

    def __init__(self, backend: SensorOperations) -> None:
        self._backend = backend

    # Sensor types --------------------------------------------------------------
    def create_type(self, *, name: str, unit: str) -> int:
        return self._backend.insert_sensor_type(name=name, unit=unit)

    def get_type(self, type_id: int) -> Optional[Dict[str, Any]]:
        return self._backend.get_sensor_type(type_id)

    def get_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self._backend.get_sensor_type_by_name(name)

    def list_types(self) -> List[Dict[str, Any]]:
        return self._backend.get_sensor_types()

    def update_type(self, type_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_sensor_type_fields(type_id, fields)

    def delete_type(self, type_id: int) -> bool:
        return self._backend.delete_sensor_type(type_id)

    def type_in_use(self, type_id: int) -> bool:
        return self._backend.count_sensors_of_type(type_id) > 0

    # Sensors -------------------------------------------------------------------
    def create_sensor(self, *, device_id: int, sensor_type_id: int, value: float, active: int = 1) -> int:
        return self._backend.insert_sensor(
            device_id=device_id, sensor_type_id=sensor_type_id, value=value, active=active
        )

    def get_sensor(self, sensor_id: int) -> Optional[Dict[str, Any]]:
        return _shape_sensor(self._backend.get_sensor(sensor_id))

    def list_sensors(self, device_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return [_shape_sensor(row) for row in self._backend.get_sensors(device_id)]

    def update_sensor(self, sensor_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_sensor_fields(sensor_id, fields)

    def toggle_sensor(self, sensor_id: int) -> bool:
        return self._backend.toggle_sensor_active(sensor_id)

    def delete_sensor(self, sensor_id: int) -> bool:
        return self._backend.delete_sensor(sensor_id)

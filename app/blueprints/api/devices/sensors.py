"""
Sensor Endpoints
================

Sensor CRUD and the active/inactive toggle.
"""

from __future__ import annotations

import logging

from flask import Response

from app.blueprints.api._common import (
    get_sensor_service as _sensor_service,
    optional_int_arg,
    parse_body,
    success as _success,
    supplied_fields,
)
from app.blueprints.api.devices import sensors_api
from app.schemas import CreateSensorRequest, UpdateSensorRequest
from app.utils.http import safe_route

logger = logging.getLogger("devices_api")


@sensors_api.get("/")
@safe_route("Failed to list sensors")
def list_sensors() -> Response:
    """Sensors with their sensor type (optional ?device_id=)."""
    return _success(_sensor_service().list_sensors(optional_int_arg("device_id")), title="Sensors")


@sensors_api.get("/<int:sensor_id>")
@safe_route("Failed to get sensor")
def get_sensor(sensor_id: int) -> Response:
    return _success(_sensor_service().get_sensor(sensor_id), title="Sensor")


@sensors_api.post("/")
@safe_route("Failed to create sensor")
def create_sensor() -> Response:
    body = parse_body(CreateSensorRequest)
    sensor = _sensor_service().create_sensor(
        device_id=body.device_id,
        sensor_type_id=body.sensor_type_id,
        value=body.value,
        active=body.active,
    )
    return _success(sensor, 201, title="Sensor created")


@sensors_api.put("/<int:sensor_id>")
@safe_route("Failed to update sensor")
def update_sensor(sensor_id: int) -> Response:
    body = parse_body(UpdateSensorRequest)
    sensor = _sensor_service().update_sensor(sensor_id, supplied_fields(body))
    return _success(sensor, title="Sensor updated")


@sensors_api.post("/<int:sensor_id>/toggle")
@safe_route("Failed to toggle sensor")
def toggle_sensor(sensor_id: int) -> Response:
    sensor = _sensor_service().toggle_sensor(sensor_id)
    state = "activated" if sensor["active"] else "deactivated"
    return _success(sensor, title=f"Sensor {state}")


@sensors_api.delete("/<int:sensor_id>")
@safe_route("Failed to remove sensor")
def delete_sensor(sensor_id: int) -> Response:
    sensor = _sensor_service().delete_sensor(sensor_id)
    return _success(sensor, title="Sensor deleted")

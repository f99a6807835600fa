"""
Type Endpoints
==============

Device types (one per provisioning category) and sensor types with their
units.
"""

from __future__ import annotations

from flask import Response

from app.blueprints.api._common import (
    get_device_service as _device_service,
    get_sensor_service as _sensor_service,
    parse_body,
    success as _success,
    supplied_fields,
)
from app.blueprints.api.devices import device_types_api, sensor_types_api
from app.schemas import DeviceTypeRequest, SensorTypeRequest, UpdateDeviceTypeRequest, UpdateSensorTypeRequest
from app.utils.http import safe_route

# ============================================================================
# Device types
# ============================================================================


@device_types_api.get("/")
@safe_route("Failed to list device types")
def list_device_types() -> Response:
    return _success(_device_service().list_types(), title="Device types")


@device_types_api.get("/<int:type_id>")
@safe_route("Failed to get device type")
def get_device_type(type_id: int) -> Response:
    return _success(_device_service().get_type(type_id), title="Device type")


@device_types_api.post("/")
@safe_route("Failed to create device type")
def create_device_type() -> Response:
    """Only the provisioning categories are accepted; an existing row is
    returned as is with 200."""
    body = parse_body(DeviceTypeRequest)
    row, created = _device_service().ensure_type(body.name)
    if created:
        return _success(row, 201, title="Device type created")
    return _success(row, title="Device type already exists")


@device_types_api.put("/<int:type_id>")
@safe_route("Failed to update device type")
def update_device_type(type_id: int) -> Response:
    body = parse_body(UpdateDeviceTypeRequest)
    row = _device_service().update_type(type_id, supplied_fields(body))
    return _success(row, title="Device type updated")


@device_types_api.delete("/<int:type_id>")
@safe_route("Failed to delete device type")
def delete_device_type(type_id: int) -> Response:
    row = _device_service().delete_type(type_id)
    return _success(row, title="Device type deleted")


# ============================================================================
# Sensor types
# ============================================================================


@sensor_types_api.get("/")
@safe_route("Failed to list sensor types")
def list_sensor_types() -> Response:
    return _success(_sensor_service().list_types(), title="Sensor types")


@sensor_types_api.get("/<int:type_id>")
@safe_route("Failed to get sensor type")
def get_sensor_type(type_id: int) -> Response:
    return _success(_sensor_service().get_type(type_id), title="Sensor type")


@sensor_types_api.post("/")
@safe_route("Failed to create sensor type")
def create_sensor_type() -> Response:
    body = parse_body(SensorTypeRequest)
    row = _sensor_service().create_type(name=body.name, unit=body.unit)
    return _success(row, 201, title="Sensor type created")


@sensor_types_api.put("/<int:type_id>")
@safe_route("Failed to update sensor type")
def update_sensor_type(type_id: int) -> Response:
    body = parse_body(UpdateSensorTypeRequest)
    row = _sensor_service().update_type(type_id, supplied_fields(body))
    return _success(row, title="Sensor type updated")


@sensor_types_api.delete("/<int:type_id>")
@safe_route("Failed to delete sensor type")
def delete_sensor_type(type_id: int) -> Response:
    row = _sensor_service().delete_type(type_id)
    return _success(row, title="Sensor type deleted")

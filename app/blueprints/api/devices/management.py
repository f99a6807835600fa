"""
Device Endpoints
================

Device CRUD plus provisioning, which creates a device of a known category
together with its fixed sensor set for the authenticated user.
"""

from __future__ import annotations

import logging

from flask import Response

from app.blueprints.api._common import (
    get_device_service as _device_service,
    optional_int_arg,
    parse_body,
    success as _success,
    supplied_fields,
)
from app.blueprints.api.devices import devices_api
from app.schemas import CreateDeviceRequest, ProvisionDeviceRequest, UpdateDeviceRequest
from app.security.auth import current_user_id
from app.utils.http import safe_route

logger = logging.getLogger("devices_api")


@devices_api.get("/")
@safe_route("Failed to list devices")
def list_devices() -> Response:
    """Devices with their sensors attached (optional ?user_id=)."""
    return _success(_device_service().list_devices(optional_int_arg("user_id")), title="Devices")


@devices_api.get("/<int:device_id>")
@safe_route("Failed to get device")
def get_device(device_id: int) -> Response:
    return _success(_device_service().get_device(device_id), title="Device")


@devices_api.post("/")
@safe_route("Failed to create device")
def create_device() -> Response:
    body = parse_body(CreateDeviceRequest)
    device = _device_service().create_device(
        user_id=body.user_id,
        device_type_id=body.device_type_id,
        name=body.name,
    )
    return _success(device, 201, title="Device created")


@devices_api.post("/provision")
@safe_route("Failed to provision device")
def provision_device() -> Response:
    """
    Provision a device for the current user.

    Body:
        {"category": "pesa" | "brazalete", "name": "..."}

    Returns 201 with the device and its sensors. A user owns at most one
    device per category.
    """
    body = parse_body(ProvisionDeviceRequest)
    device = _device_service().provision(user_id=current_user_id(), category=body.category, name=body.name)
    return _success(device, 201, title="Device provisioned")


@devices_api.put("/<int:device_id>")
@safe_route("Failed to update device")
def update_device(device_id: int) -> Response:
    body = parse_body(UpdateDeviceRequest)
    device = _device_service().update_device(device_id, supplied_fields(body))
    return _success(device, title="Device updated")


@devices_api.delete("/<int:device_id>")
@safe_route("Failed to delete device")
def delete_device(device_id: int) -> Response:
    device = _device_service().delete_device(device_id)
    return _success(device, title="Device deleted")

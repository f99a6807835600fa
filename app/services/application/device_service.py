"""
Device Service
==============
Devices, device types and provisioning.

Provisioning creates a device of a known category together with the fixed
set of sensors that category carries. The type lookup / creation, the
device row and every sensor row are written in a single transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from app.constants import Provisioning
from app.domain.exceptions import BadRequestError, ConflictError, NotFoundError, ServiceError, ValidationError
from app.enums.device import DeviceCategory
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.sensors import SensorRepository
from infrastructure.database.repositories.users import UserRepository
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


def parse_category(value: Any) -> DeviceCategory:
    try:
        return DeviceCategory(value)
    except ValueError:
        allowed = ", ".join(DeviceCategory.values())
        raise BadRequestError(
            f"Unknown device category '{value}'. Allowed: {allowed}",
            errors={"category": [f"Must be one of: {allowed}"]},
        ) from None


@dataclass
class DeviceService:
    repository: DeviceRepository
    sensor_repo: SensorRepository
    user_repo: UserRepository
    audit_logger: Optional[AuditLogger] = None

    # --- Device types ----------------------------------------------------------
    def list_types(self) -> List[Dict[str, Any]]:
        return self.repository.list_types()

    def get_type(self, type_id: int) -> Dict[str, Any]:
        row = self.repository.get_type(type_id)
        if row is None:
            raise NotFoundError(f"Device type {type_id} not found")
        return row

    def ensure_type(self, name: str) -> Tuple[Dict[str, Any], bool]:
        """Return the device type row for a known category, creating it when
        missing. The flag tells whether a row was created."""
        category = parse_category(name)
        existing = self.repository.get_type_by_name(category.value)
        if existing is not None:
            return existing, False
        return self.get_type(self.repository.create_type(category.value)), True

    def update_type(self, type_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_type(type_id)
        name = fields.get("name")
        if name is not None:
            category = parse_category(name)
            existing = self.repository.get_type_by_name(category.value)
            if existing is not None and existing["id"] != type_id:
                raise ConflictError(f"Device type '{category.value}' already exists")
            fields = {**fields, "name": category.value}
        self.repository.update_type(type_id, fields)
        return self.get_type(type_id)

    def delete_type(self, type_id: int) -> Dict[str, Any]:
        row = self.get_type(type_id)
        if self.repository.type_in_use(type_id):
            raise ConflictError("Device type is still used by devices")
        self.repository.delete_type(type_id)
        logger.info("Device type '%s' deleted", row["name"])
        return row

    # --- Devices ---------------------------------------------------------------
    def list_devices(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        devices = self.repository.list_devices(user_id)
        for device in devices:
            device["sensors"] = self.sensor_repo.list_sensors(device["id"])
        return devices

    def get_device(self, device_id: int) -> Dict[str, Any]:
        device = self.repository.get_device(device_id)
        if device is None:
            raise NotFoundError(f"Device {device_id} not found")
        device["sensors"] = self.sensor_repo.list_sensors(device_id)
        return device

    def create_device(self, *, user_id: int, device_type_id: int, name: str) -> Dict[str, Any]:
        errors: Dict[str, List[str]] = {}
        if self.user_repo.get_user(user_id) is None:
            errors["user_id"] = [f"User {user_id} does not exist"]
        if self.repository.get_type(device_type_id) is None:
            errors["device_type_id"] = [f"Device type {device_type_id} does not exist"]
        if errors:
            raise ValidationError("Invalid device references", errors=errors)

        device_id = self.repository.create_device(user_id=user_id, device_type_id=device_type_id, name=name)
        return self.get_device(device_id)

    def update_device(self, device_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_device(device_id)
        self.repository.update_device(device_id, fields)
        return self.get_device(device_id)

    def delete_device(self, device_id: int) -> Dict[str, Any]:
        device = self.get_device(device_id)
        self.repository.delete_device(device_id)
        logger.info("Device %s deleted with %d sensor(s)", device_id, len(device["sensors"]))
        return device

    # --- Provisioning ----------------------------------------------------------
    def provision(self, *, user_id: int, category: str, name: str) -> Dict[str, Any]:
        """Create a device of *category* and its sensors for *user_id*.

        Raises:
            BadRequestError: unknown category, or the user already owns a
                device of this category.
            ServiceError: a required sensor type is missing; nothing is kept.
        """
        device_category = parse_category(category)
        owned = self.repository.count_user_devices(user_id, device_category.value)
        if owned >= Provisioning.MAX_DEVICES_PER_CATEGORY:
            self._audit(user_id, "provision", "limit_reached", category=device_category.value)
            raise BadRequestError(
                f"You can only register {Provisioning.MAX_DEVICES_PER_CATEGORY} "
                f"'{device_category.value}' device"
            )

        initial_value = Provisioning.INITIAL_VALUE[device_category]
        with self.repository.transaction():
            device_type, _ = self.ensure_type(device_category.value)
            device_id = self.repository.create_device(
                user_id=user_id,
                device_type_id=device_type["id"],
                name=name,
            )
            for sensor_type_name in Provisioning.SENSORS[device_category]:
                sensor_type = self.sensor_repo.get_type_by_name(sensor_type_name)
                if sensor_type is None:
                    raise ServiceError(f"Sensor type '{sensor_type_name}' is not configured")
                self.sensor_repo.create_sensor(
                    device_id=device_id,
                    sensor_type_id=sensor_type["id"],
                    value=initial_value,
                    active=1,
                )

        self._audit(user_id, "provision", "success", device_id=device_id, category=device_category.value)
        return self.get_device(device_id)

    def _audit(self, actor: Any, action: str, outcome: str, **metadata: Any) -> None:
        if self.audit_logger:
            self.audit_logger.log_event(
                actor=str(actor),
                action=action,
                resource="device",
                outcome=outcome,
                **metadata,
            )

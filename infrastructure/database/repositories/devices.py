from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from infrastructure.database.ops.devices import DeviceOperations


def _shape_device(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    device = dict(row)
    type_name = device.pop("device_type_name", None)
    device["device_type"] = {"id": device["device_type_id"], "name": type_name}
    return device


class DeviceRepository:
    """Facade over device and device type persistence."""

    def __init__(self, backend: DeviceOperations) -> None:
        self._backend = backend

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        with self._backend.transaction() as conn:
            yield conn

    # Device types --------------------------------------------------------------
    def create_type(self, name: str) -> int:
        return self._backend.insert_device_type(name)

    def get_type(self, type_id: int) -> Optional[Dict[str, Any]]:
        return self._backend.get_device_type(type_id)

    def get_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self._backend.get_device_type_by_name(name)

    def list_types(self) -> List[Dict[str, Any]]:
        return self._backend.get_device_types()

    def update_type(self, type_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_device_type_fields(type_id, fields)

    def delete_type(self, type_id: int) -> bool:
        return self._backend.delete_device_type(type_id)

    def type_in_use(self, type_id: int) -> bool:
        return self._backend.count_devices_of_type(type_id) > 0

    # Devices -------------------------------------------------------------------
    def create_device(self, *, user_id: int, device_type_id: int, name: str) -> int:
        return self._backend.insert_device(user_id=user_id, device_type_id=device_type_id, name=name)

    def get_device(self, device_id: int) -> Optional[Dict[str, Any]]:
        return _shape_device(self._backend.get_device(device_id))

    def list_devices(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return [_shape_device(row) for row in self._backend.get_devices(user_id)]

    def count_user_devices(self, user_id: int, category: str) -> int:
        return self._backend.count_user_devices_of_type(user_id, category)

    def update_device(self, device_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_device_fields(device_id, fields)

    def delete_device(self, device_id: int) -> bool:
        return self._backend.delete_device(device_id)

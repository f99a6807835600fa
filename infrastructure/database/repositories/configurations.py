from __future__ import annotations

from typing import Any, Dict, List, Optional

from infrastructure.database.ops.configurations import ConfigurationOperations


class ConfigurationRepository:
    """Facade over configuration and configuration type persistence."""

    def __init__(self, backend: ConfigurationOperations) -> None:
        self._backend = backend

    # Configuration types -------------------------------------------------------
    def create_type(self, name: str) -> int:
        return self._backend.insert_configuration_type(name)

    def get_type(self, type_id: int) -> Optional[Dict[str, Any]]:
        return self._backend.get_configuration_type(type_id)

    def get_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self._backend.get_configuration_type_by_name(name)

    def list_types(self) -> List[Dict[str, Any]]:
        return self._backend.get_configuration_types()

    def update_type(self, type_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_configuration_type_fields(type_id, fields)

    def delete_type(self, type_id: int) -> bool:
        return self._backend.delete_configuration_type(type_id)

    def type_in_use(self, type_id: int) -> bool:
        return self._backend.count_configurations_of_type(type_id) > 0

    # Configurations ------------------------------------------------------------
    def create_configuration(self, *, user_id: int, configuration_type_id: int, data: str) -> int:
        return self._backend.insert_configuration(
            user_id=user_id, configuration_type_id=configuration_type_id, data=data
        )

    def get_configuration(self, configuration_id: int) -> Optional[Dict[str, Any]]:
        return self._backend.get_configuration(configuration_id)

    def list_configurations(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._backend.get_configurations(user_id)

    def find_user_configuration(self, user_id: int, type_name: str) -> Optional[Dict[str, Any]]:
        return self._backend.get_user_configuration_by_type_name(user_id, type_name)

    def update_configuration(self, configuration_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_configuration_fields(configuration_id, fields)

    def delete_configuration(self, configuration_id: int) -> bool:
        return self._backend.delete_configuration(configuration_id)

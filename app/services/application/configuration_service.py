"""
Configuration Service
=====================
Per-user configurations (goal thresholds such as the daily step target)
and the configuration types that name them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.domain.exceptions import ConflictError, NotFoundError, ValidationError
from infrastructure.database.repositories.configurations import ConfigurationRepository
from infrastructure.database.repositories.users import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class ConfigurationService:
    repository: ConfigurationRepository
    user_repo: UserRepository

    # --- Configuration types ---------------------------------------------------
    def list_types(self) -> List[Dict[str, Any]]:
        return self.repository.list_types()

    def get_type(self, type_id: int) -> Dict[str, Any]:
        row = self.repository.get_type(type_id)
        if row is None:
            raise NotFoundError(f"Configuration type {type_id} not found")
        return row

    def create_type(self, name: str) -> Dict[str, Any]:
        if self.repository.get_type_by_name(name) is not None:
            raise ConflictError(f"Configuration type '{name}' already exists")
        return self.get_type(self.repository.create_type(name))

    def update_type(self, type_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_type(type_id)
        name = fields.get("name")
        if name is not None:
            existing = self.repository.get_type_by_name(name)
            if existing is not None and existing["id"] != type_id:
                raise ConflictError(f"Configuration type '{name}' already exists")
        self.repository.update_type(type_id, fields)
        return self.get_type(type_id)

    def delete_type(self, type_id: int) -> Dict[str, Any]:
        row = self.get_type(type_id)
        if self.repository.type_in_use(type_id):
            raise ConflictError("Configuration type is still used by configurations")
        self.repository.delete_type(type_id)
        return row

    # --- Configurations --------------------------------------------------------
    def list_configurations(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return [self._expand(row) for row in self.repository.list_configurations(user_id)]

    def list_user_configurations(self, user_id: int) -> List[Dict[str, Any]]:
        if self.user_repo.get_user(user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
        return self.list_configurations(user_id)

    def get_configuration(self, configuration_id: int) -> Dict[str, Any]:
        row = self.repository.get_configuration(configuration_id)
        if row is None:
            raise NotFoundError(f"Configuration {configuration_id} not found")
        return self._expand(row)

    def create_configuration(self, *, user_id: int, configuration_type_id: int, data: str) -> Dict[str, Any]:
        errors: Dict[str, List[str]] = {}
        if self.user_repo.get_user(user_id) is None:
            errors["user_id"] = [f"User {user_id} does not exist"]
        if self.repository.get_type(configuration_type_id) is None:
            errors["configuration_type_id"] = [f"Configuration type {configuration_type_id} does not exist"]
        if errors:
            raise ValidationError("Invalid configuration references", errors=errors)

        configuration_id = self.repository.create_configuration(
            user_id=user_id,
            configuration_type_id=configuration_type_id,
            data=data,
        )
        return self.get_configuration(configuration_id)

    def update_configuration(self, configuration_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_configuration(configuration_id)
        self.repository.update_configuration(configuration_id, fields)
        return self.get_configuration(configuration_id)

    def delete_configuration(self, configuration_id: int) -> Dict[str, Any]:
        row = self.get_configuration(configuration_id)
        self.repository.delete_configuration(configuration_id)
        return row

    def find_user_goal(self, user_id: int, type_name: str) -> Dict[str, Any]:
        """Return the user's configuration of *type_name* (404 when absent)."""
        row = self.repository.find_user_configuration(user_id, type_name)
        if row is None:
            raise NotFoundError(f"No '{type_name}' configuration found for this user")
        return row

    def _expand(self, row: Dict[str, Any]) -> Dict[str, Any]:
        row["user"] = self.user_repo.get_user(row["user_id"])
        row["configuration_type"] = self.repository.get_type(row["configuration_type_id"])
        return row

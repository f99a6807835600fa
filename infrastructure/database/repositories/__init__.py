"""Repository facades exposing typed accessors over low-level mixins."""

from infrastructure.database.repositories.configurations import ConfigurationRepository
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.habits import HabitRepository
from infrastructure.database.repositories.sensors import SensorRepository
from infrastructure.database.repositories.users import UserRepository

__all__ = [
    "ConfigurationRepository",
    "DeviceRepository",
    "HabitRepository",
    "SensorRepository",
    "UserRepository",
]

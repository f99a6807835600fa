"""
Device-related Enumerations
============================

Enums for wearable / scale devices, the readings they publish through the
broker gateway and the goals compared against those readings.
"""

from enum import Enum


class DeviceCategory(str, Enum):
    """
    Device categories accepted by provisioning.

    The values are the literal device type names stored in ``device_types``.
    """

    SCALE = "pesa"
    BRACELET = "brazalete"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class GatewayMetric(str, Enum):
    """Reading shortcuts exposed by the gateway blueprint."""

    HEART_RATE = "heart-rate"
    STEPS = "steps"
    DISTANCE = "distance"
    ALCOHOL = "alcohol"
    TEMPERATURE = "temperature"
    WEIGHT = "weight"

    @classmethod
    def _missing_(cls, value: object) -> "GatewayMetric | None":
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class GoalKind(str, Enum):
    """Goals that compare a live reading against a stored configuration."""

    STEPS = "steps"
    DISTANCE = "distance"

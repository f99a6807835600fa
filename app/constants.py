"""
Application Constants
=====================

Centralized constants for device provisioning, broker topics and seed data.
Organized by domain for easy discovery and maintenance.

Usage:
    from app.constants import Provisioning, Topics
"""

from app.enums.device import DeviceCategory, GatewayMetric, GoalKind

# =============================================================================
# Device provisioning
# =============================================================================


class Provisioning:
    """Fixed sensor sets and initial values per device category."""

    # Sensor type names created for each category, in creation order.
    SENSORS: dict[DeviceCategory, tuple[str, ...]] = {
        DeviceCategory.BRACELET: (
            "Pantalla",
            "Ritmo",
            "Temperatura",
            "Alcohol",
            "Distancia",
            "Pasos",
        ),
        DeviceCategory.SCALE: ("Peso",),
    }

    INITIAL_VALUE: dict[DeviceCategory, float] = {
        DeviceCategory.SCALE: 1,
        DeviceCategory.BRACELET: 5,
    }

    # Devices a single user may own per category.
    MAX_DEVICES_PER_CATEGORY = 1


# =============================================================================
# Broker gateway
# =============================================================================


class Topics:
    """Broker topics published by the devices."""

    SCREEN = "BrazaletePantalla"
    SCREEN_MIN = 1
    SCREEN_MAX = 4

    READINGS: dict[GatewayMetric, str] = {
        GatewayMetric.HEART_RATE: "BrazaletePulso",
        GatewayMetric.STEPS: "BrazaletePasos",
        GatewayMetric.DISTANCE: "BrazaleteDistancia",
        GatewayMetric.ALCOHOL: "BrazaleteAlcohol",
        GatewayMetric.TEMPERATURE: "BrazaleteTemperatura",
        GatewayMetric.WEIGHT: "Peso",
    }

    # Sensor type whose unit is reported next to each reading.
    SENSOR_TYPES: dict[GatewayMetric, str] = {
        GatewayMetric.HEART_RATE: "Ritmo",
        GatewayMetric.STEPS: "Pasos",
        GatewayMetric.DISTANCE: "Distancia",
        GatewayMetric.ALCOHOL: "Alcohol",
        GatewayMetric.TEMPERATURE: "Temperatura",
        GatewayMetric.WEIGHT: "Peso",
    }


class Goals:
    """Reading topic and configuration type compared for each goal."""

    METRICS: dict[GoalKind, GatewayMetric] = {
        GoalKind.STEPS: GatewayMetric.STEPS,
        GoalKind.DISTANCE: GatewayMetric.DISTANCE,
    }

    TOPICS: dict[GoalKind, str] = {
        GoalKind.STEPS: Topics.READINGS[GatewayMetric.STEPS],
        GoalKind.DISTANCE: Topics.READINGS[GatewayMetric.DISTANCE],
    }

    CONFIGURATION_TYPES: dict[GoalKind, str] = {
        GoalKind.STEPS: "alarma_pasos",
        GoalKind.DISTANCE: "alarma_distancia",
    }


# =============================================================================
# Nutrition
# =============================================================================

# Sensor type whose unit is appended to every nutrition ingredient line.
WEIGHT_SENSOR_TYPE = "Peso"


# =============================================================================
# Seed data
# =============================================================================


class Seeds:
    """Reference rows inserted by ``create_tables`` when missing."""

    SENSOR_TYPES: tuple[tuple[str, str], ...] = (
        ("Pantalla", ""),
        ("Ritmo", "bpm"),
        ("Temperatura", "°C"),
        ("Alcohol", "mg/L"),
        ("Distancia", "km"),
        ("Pasos", "pasos"),
        ("Peso", "gr"),
    )

    DEVICE_TYPES: tuple[str, ...] = tuple(DeviceCategory.values())

    CONFIGURATION_TYPES: tuple[str, ...] = tuple(Goals.CONFIGURATION_TYPES.values())

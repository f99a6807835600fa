"""
Device Management API Blueprints
================================

Modular device management API organized into logical sub-modules:
- management.py: Device CRUD and provisioning of a device with its sensors
- sensors.py: Sensor CRUD and active toggling
- types.py: Device types and sensor types

Blueprints and their prefixes:
- devices_api        /api/v1/devices
- sensors_api        /api/v1/sensors
- device_types_api   /api/v1/device-types
- sensor_types_api   /api/v1/sensor-types
"""

from __future__ import annotations

import logging

from flask import Blueprint

# Create blueprints
devices_api = Blueprint("devices_api", __name__)
sensors_api = Blueprint("sensors_api", __name__)
device_types_api = Blueprint("device_types_api", __name__)
sensor_types_api = Blueprint("sensor_types_api", __name__)
logger = logging.getLogger("devices_api")

# Import all sub-modules to register their routes
from . import (
    management,
    sensors,
    types,
)

_ = (management, sensors, types)

__all__ = ["device_types_api", "devices_api", "sensor_types_api", "sensors_api"]

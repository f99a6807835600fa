"""
Device Schemas
==============

Pydantic models for device, sensor and type request validation.
"""

from typing import Optional

from pydantic import Field

from app.schemas.common import RequestModel

# ============================================================================
# Device Schemas
# ============================================================================


class CreateDeviceRequest(RequestModel):
    """Request model for creating a device directly"""

    user_id: int = Field(..., gt=0)
    device_type_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=100, description="Device name")


class UpdateDeviceRequest(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class ProvisionDeviceRequest(RequestModel):
    """Provision a device and its sensors for the authenticated user.

    ``category`` is checked by the service so unknown values answer 400.
    """

    category: str = Field(..., min_length=1, max_length=50, description="pesa or brazalete")
    name: str = Field(..., min_length=1, max_length=100)


class DeviceTypeRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=50)


class UpdateDeviceTypeRequest(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)


# ============================================================================
# Sensor Schemas
# ============================================================================


class CreateSensorRequest(RequestModel):
    device_id: int = Field(..., gt=0)
    sensor_type_id: int = Field(..., gt=0)
    value: float = Field(...)
    active: int = Field(default=1, ge=0, le=1)


class UpdateSensorRequest(RequestModel):
    value: Optional[float] = None
    active: Optional[int] = Field(default=None, ge=0, le=1)


class SensorTypeRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=50)
    unit: str = Field(..., max_length=20)


class UpdateSensorTypeRequest(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    unit: Optional[str] = Field(default=None, max_length=20)

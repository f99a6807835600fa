"""
Schemas Module
==============

This module provides Pydantic models for request validation and the
response envelope.
"""

from app.schemas.common import Envelope, RequestModel, field_errors
from app.schemas.device import (
    CreateDeviceRequest,
    CreateSensorRequest,
    DeviceTypeRequest,
    ProvisionDeviceRequest,
    SensorTypeRequest,
    UpdateDeviceRequest,
    UpdateDeviceTypeRequest,
    UpdateSensorRequest,
    UpdateSensorTypeRequest,
)
from app.schemas.gateway import NutritionRequest, PublishRequest, RetainedMessageRequest, ScreenRequest
from app.schemas.habit import (
    ConfigurationTypeRequest,
    CreateConfigurationRequest,
    CreateHabitRequest,
    UpdateConfigurationRequest,
    UpdateConfigurationTypeRequest,
    UpdateHabitRequest,
)
from app.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordRecoveryRequest,
    PasswordResetRequest,
    RegisterUserRequest,
    UpdateProfileRequest,
    VerifyAccountRequest,
)

__all__ = [
    "ChangePasswordRequest",
    "ConfigurationTypeRequest",
    "CreateConfigurationRequest",
    "CreateDeviceRequest",
    "CreateHabitRequest",
    "CreateSensorRequest",
    "DeviceTypeRequest",
    "Envelope",
    "LoginRequest",
    "NutritionRequest",
    "PasswordRecoveryRequest",
    "PasswordResetRequest",
    "ProvisionDeviceRequest",
    "PublishRequest",
    "RegisterUserRequest",
    "RequestModel",
    "RetainedMessageRequest",
    "ScreenRequest",
    "SensorTypeRequest",
    "UpdateConfigurationRequest",
    "UpdateConfigurationTypeRequest",
    "UpdateDeviceRequest",
    "UpdateDeviceTypeRequest",
    "UpdateHabitRequest",
    "UpdateProfileRequest",
    "UpdateSensorRequest",
    "UpdateSensorTypeRequest",
    "VerifyAccountRequest",
    "field_errors",
]

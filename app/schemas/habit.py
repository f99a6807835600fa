"""
Habit and Configuration Schemas
===============================

Pydantic models for habits, per-user configurations and configuration types.
"""

from typing import Annotated, Optional

from pydantic import BeforeValidator, Field

from app.schemas.common import RequestModel, as_text

GoalData = Annotated[str, BeforeValidator(as_text), Field(min_length=1, max_length=1000)]


class CreateHabitRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    user_id: Optional[int] = Field(default=None, gt=0)


class UpdateHabitRequest(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    user_id: Optional[int] = Field(default=None, gt=0)


class CreateConfigurationRequest(RequestModel):
    configuration_type_id: int = Field(..., gt=0)
    data: GoalData
    user_id: int = Field(..., gt=0)


class UpdateConfigurationRequest(RequestModel):
    data: Optional[GoalData] = None


class ConfigurationTypeRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)


class UpdateConfigurationTypeRequest(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)

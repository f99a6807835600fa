"""
Blueprint Common Utilities
==========================

Shared helper functions for all API blueprints.
Import these instead of duplicating helper code in each blueprint.

Usage:
    from app.blueprints.api._common import (
        get_container, parse_body, success, fail,
        get_device_service, get_gateway_service, ...
    )

This module centralizes:
- Service container access
- Request body parsing and validation
- Standardized response helpers
- Common service accessors
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

from flask import current_app, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.domain.exceptions import BadRequestError, ValidationError
from app.schemas.common import field_errors
from app.utils.http import error_response, success_response

logger = logging.getLogger("api._common")

M = TypeVar("M", bound=BaseModel)

# ============================================================================
# CONTAINER ACCESS
# ============================================================================


def get_container():
    """
    Get the service container from Flask app config.

    Returns:
        ServiceContainer: The application service container

    Raises:
        RuntimeError: If container is not configured
    """
    container = current_app.config.get("CONTAINER")
    if not container:
        raise RuntimeError("ServiceContainer not found in app config")
    return container


# ============================================================================
# REQUEST HELPERS
# ============================================================================


def get_json() -> dict:
    """
    Get the JSON request body.

    Returns:
        dict: Parsed JSON object, or an empty dict when there is no body

    Raises:
        BadRequestError: If the body is present but not a JSON object
    """
    if not request.get_data(cache=True):
        return {}
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise BadRequestError("Request body must be a JSON object")
    return payload


def parse_body(model: Type[M]) -> M:
    """
    Validate the JSON request body against a pydantic model.

    Raises:
        ValidationError: With field-level messages when the body does not
            match the model (answered with 422).
    """
    raw = get_json()
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        logger.debug("Validation failed for %s: %s", model.__name__, exc.errors())
        raise ValidationError("The given data was invalid", errors=field_errors(exc)) from None


def supplied_fields(body: BaseModel) -> dict[str, Any]:
    """Fields the caller actually sent, for partial updates."""
    return body.model_dump(exclude_unset=True, exclude_none=True)


def optional_int_arg(name: str) -> Optional[int]:
    """Read an integer query parameter; a non-integer value is a 400."""
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise BadRequestError(
            f"Query parameter '{name}' must be an integer",
            errors={name: ["Must be an integer"]},
        ) from None


# ============================================================================
# RESPONSE HELPERS
# ============================================================================


def success(data: Any = None, status: int = 200, *, title: str = "Success", message: str = ""):
    """
    Standard success response wrapper.

    Returns:
        Flask Response with format:
        {"type": "success", "title": ..., "message": ..., "data": ...}
    """
    return success_response(data, status, title=title, message=message)


def fail(message: str, status: int = 400, *, title: str | None = None, errors: dict | None = None, data: Any = None):
    """
    Standard error response wrapper.

    Returns:
        Flask Response with format:
        {"type": "error", "title": ..., "message": ..., "errors"?: ..., "data"?: ...}
    """
    return error_response(message, status, title=title, errors=errors, data=data)


# ============================================================================
# SERVICE ACCESSORS
# ============================================================================


def _service(attribute: str, label: str):
    container = get_container()
    service = getattr(container, attribute, None)
    if service is None:
        raise RuntimeError(f"{label} not available")
    return service


def get_database():
    return _service("database", "Database")


def get_user_service():
    return _service("user_service", "User service")


def get_habit_service():
    return _service("habit_service", "Habit service")


def get_configuration_service():
    return _service("configuration_service", "Configuration service")


def get_device_service():
    return _service("device_service", "Device service")


def get_sensor_service():
    return _service("sensor_service", "Sensor service")


def get_gateway_service():
    return _service("gateway_service", "Gateway service")


def get_food_service():
    return _service("food_service", "Food service")

"""
Configurations API Blueprints
=============================

Per-user configurations (goals) and the configuration types they refer to.

Routes (under /api/v1/configurations):
- GET    /                  list (optional ?user_id=)
- GET    /user/<user_id>    configurations of one user
- GET    /<id>              one configuration
- POST   /                  create
- PUT    /<id>              update data
- DELETE /<id>              delete
- POST   /goals/steps       compare steps against the user's goal
- POST   /goals/distance    compare distance against the user's goal

Routes (under /api/v1/configuration-types):
- GET / | GET /<id> | POST / | PUT /<id> | DELETE /<id>
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from app.blueprints.api._common import (
    get_configuration_service as _configuration_service,
    optional_int_arg,
    parse_body,
    success as _success,
    supplied_fields,
)
from app.blueprints.api.gateway import goal_response
from app.enums import GoalKind
from app.schemas import (
    ConfigurationTypeRequest,
    CreateConfigurationRequest,
    UpdateConfigurationRequest,
    UpdateConfigurationTypeRequest,
)
from app.utils.http import safe_route

logger = logging.getLogger("configurations_api")

configurations_api = Blueprint("configurations_api", __name__)
configuration_types_api = Blueprint("configuration_types_api", __name__)


# ============================================================================
# Configurations
# ============================================================================


@configurations_api.get("/")
@safe_route("Failed to list configurations")
def list_configurations() -> Response:
    data = _configuration_service().list_configurations(optional_int_arg("user_id"))
    return _success(data, title="Configurations")


@configurations_api.get("/user/<int:user_id>")
@safe_route("Failed to list user configurations")
def list_user_configurations(user_id: int) -> Response:
    data = _configuration_service().list_user_configurations(user_id)
    return _success(data, title="Configurations")


@configurations_api.get("/<int:configuration_id>")
@safe_route("Failed to get configuration")
def get_configuration(configuration_id: int) -> Response:
    return _success(_configuration_service().get_configuration(configuration_id), title="Configuration")


@configurations_api.post("/")
@safe_route("Failed to create configuration")
def create_configuration() -> Response:
    body = parse_body(CreateConfigurationRequest)
    configuration = _configuration_service().create_configuration(
        user_id=body.user_id,
        configuration_type_id=body.configuration_type_id,
        data=body.data,
    )
    return _success(configuration, 201, title="Configuration created")


@configurations_api.put("/<int:configuration_id>")
@safe_route("Failed to update configuration")
def update_configuration(configuration_id: int) -> Response:
    body = parse_body(UpdateConfigurationRequest)
    configuration = _configuration_service().update_configuration(configuration_id, supplied_fields(body))
    return _success(configuration, title="Configuration updated")


@configurations_api.delete("/<int:configuration_id>")
@safe_route("Failed to delete configuration")
def delete_configuration(configuration_id: int) -> Response:
    configuration = _configuration_service().delete_configuration(configuration_id)
    return _success(configuration, title="Configuration deleted")


@configurations_api.post("/goals/steps")
@safe_route("Failed to compare steps goal")
def compare_steps_goal() -> Response:
    return goal_response(GoalKind.STEPS)


@configurations_api.post("/goals/distance")
@safe_route("Failed to compare distance goal")
def compare_distance_goal() -> Response:
    return goal_response(GoalKind.DISTANCE)


# ============================================================================
# Configuration types
# ============================================================================


@configuration_types_api.get("/")
@safe_route("Failed to list configuration types")
def list_configuration_types() -> Response:
    return _success(_configuration_service().list_types(), title="Configuration types")


@configuration_types_api.get("/<int:type_id>")
@safe_route("Failed to get configuration type")
def get_configuration_type(type_id: int) -> Response:
    return _success(_configuration_service().get_type(type_id), title="Configuration type")


@configuration_types_api.post("/")
@safe_route("Failed to create configuration type")
def create_configuration_type() -> Response:
    body = parse_body(ConfigurationTypeRequest)
    row = _configuration_service().create_type(body.name)
    return _success(row, 201, title="Configuration type created")


@configuration_types_api.put("/<int:type_id>")
@safe_route("Failed to update configuration type")
def update_configuration_type(type_id: int) -> Response:
    body = parse_body(UpdateConfigurationTypeRequest)
    row = _configuration_service().update_type(type_id, supplied_fields(body))
    return _success(row, title="Configuration type updated")


@configuration_types_api.delete("/<int:type_id>")
@safe_route("Failed to delete configuration type")
def delete_configuration_type(type_id: int) -> Response:
    row = _configuration_service().delete_type(type_id)
    return _success(row, title="Configuration type deleted")

"""
Broker Gateway API Blueprint
============================

Thin forwarding to the MQTT broker's REST API, plus goal comparisons
between live bracelet readings and the user's stored goals.

Routes (under /api/v1/gateway):
- POST /retained            read and decode a retained message
- POST /publish             publish a message (retained)
- POST /screen              switch the bracelet screen (1-4)
- GET  /readings/<metric>   latest reading with its unit
- POST /goals/steps         compare steps against the user's goal
- POST /goals/distance      compare distance against the user's goal
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from app.blueprints.api._common import (
    fail as _fail,
    get_gateway_service as _gateway_service,
    parse_body,
    success as _success,
)
from app.enums import GoalKind
from app.schemas import PublishRequest, RetainedMessageRequest, ScreenRequest
from app.security.auth import current_user_id
from app.utils.http import safe_route

logger = logging.getLogger("gateway_api")

gateway_api = Blueprint("gateway_api", __name__)


def goal_response(kind: GoalKind) -> Response:
    """200 when the live reading equals the stored goal, 400 otherwise.

    Both values are returned in ``data`` either way.
    """
    comparison = _gateway_service().compare_goal(current_user_id(), kind)
    if comparison.reached:
        return _success(comparison.to_dict(), title="Goal reached", message=f"The {kind.value} goal was reached")
    return _fail(
        f"The {kind.value} goal has not been reached yet",
        400,
        title="Goal not reached",
        data=comparison.to_dict(),
    )


@gateway_api.post("/retained")
@safe_route("Failed to read retained message")
def read_retained() -> Response:
    body = parse_body(RetainedMessageRequest)
    message = _gateway_service().read_retained(body.topic)
    return _success({"retained_message": message}, title="Retained message")


@gateway_api.post("/publish")
@safe_route("Failed to publish message")
def publish_message() -> Response:
    body = parse_body(PublishRequest)
    data = _gateway_service().publish(body.topic, body.message)
    return _success(data, title="Message published")


@gateway_api.post("/screen")
@safe_route("Failed to change screen")
def set_screen() -> Response:
    body = parse_body(ScreenRequest)
    data = _gateway_service().set_screen(body.value)
    return _success(data, title="Screen changed")


@gateway_api.get("/readings/<metric>")
@safe_route("Failed to read sensor value")
def read_metric(metric: str) -> Response:
    return _success(_gateway_service().read_metric(metric), title="Reading")


@gateway_api.post("/goals/steps")
@safe_route("Failed to compare steps goal")
def compare_steps_goal() -> Response:
    return goal_response(GoalKind.STEPS)


@gateway_api.post("/goals/distance")
@safe_route("Failed to compare distance goal")
def compare_distance_goal() -> Response:
    return goal_response(GoalKind.DISTANCE)

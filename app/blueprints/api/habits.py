"""
Habits API Blueprint
====================

CRUD endpoints for habits.

Routes (under /api/v1/habits):
- GET    /            list habits (optional ?user_id=)
- GET    /<id>        one habit
- POST   /            create
- PUT    /<id>        partial update
- DELETE /<id>        delete
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from app.blueprints.api._common import (
    get_habit_service as _habit_service,
    optional_int_arg,
    parse_body,
    success as _success,
    supplied_fields,
)
from app.schemas import CreateHabitRequest, UpdateHabitRequest
from app.utils.http import safe_route

logger = logging.getLogger("habits_api")

habits_api = Blueprint("habits_api", __name__)


@habits_api.get("/")
@safe_route("Failed to list habits")
def list_habits() -> Response:
    return _success(_habit_service().list_habits(optional_int_arg("user_id")), title="Habits")


@habits_api.get("/<int:habit_id>")
@safe_route("Failed to get habit")
def get_habit(habit_id: int) -> Response:
    return _success(_habit_service().get_habit(habit_id), title="Habit")


@habits_api.post("/")
@safe_route("Failed to create habit")
def create_habit() -> Response:
    body = parse_body(CreateHabitRequest)
    habit = _habit_service().create_habit(name=body.name, description=body.description, user_id=body.user_id)
    return _success(habit, 201, title="Habit created")


@habits_api.put("/<int:habit_id>")
@safe_route("Failed to update habit")
def update_habit(habit_id: int) -> Response:
    body = parse_body(UpdateHabitRequest)
    habit = _habit_service().update_habit(habit_id, supplied_fields(body))
    return _success(habit, title="Habit updated")


@habits_api.delete("/<int:habit_id>")
@safe_route("Failed to delete habit")
def delete_habit(habit_id: int) -> Response:
    habit = _habit_service().delete_habit(habit_id)
    return _success(habit, title="Habit deleted")

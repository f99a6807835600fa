"""
Foods API Blueprint
===================

Food search and nutrition analysis through the nutrition API.

Routes (under /api/v1/foods):
- GET  /search?name=<food>   search the food database
- POST /nutrition            nutrition facts for a list of ingredients
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, request

from app.blueprints.api._common import get_food_service as _food_service, parse_body, success as _success
from app.schemas import NutritionRequest
from app.utils.http import safe_route

logger = logging.getLogger("foods_api")

foods_api = Blueprint("foods_api", __name__)


@foods_api.get("/search")
@safe_route("Failed to search foods")
def search_food() -> Response:
    data = _food_service().search(request.args.get("name"))
    return _success(data, title="Foods found")


@foods_api.post("/nutrition")
@safe_route("Failed to calculate nutrition")
def nutrition_details() -> Response:
    """
    Ingredients are given as quantities; each one is measured in the unit of
    the weight sensor, e.g. ``["100 rice"]`` becomes ``"100 rice gr"``.
    """
    body = parse_body(NutritionRequest)
    data = _food_service().nutrition(body.ingredients, title=body.title)
    return _success(data, title="Nutrition details")

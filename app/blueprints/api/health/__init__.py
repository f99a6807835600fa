"""
Health API Blueprint
====================

Liveness endpoint for monitoring tools.

Routes:
- GET /api/v1/health/ - database reachability check
"""

from __future__ import annotations

import logging

from flask import Blueprint

logger = logging.getLogger("health_api")

# Create the blueprint
health_api = Blueprint("health_api", __name__)

# Import and register routes from submodules
from app.blueprints.api.health.system import register_system_routes

register_system_routes(health_api)

__all__ = ["health_api"]

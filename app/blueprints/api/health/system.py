"""
System Health Endpoints
=======================

Core liveness check.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from app.blueprints.api._common import fail as _fail, get_database as _database, success as _success
from app.utils.http import safe_route
from app.utils.time import iso_now

logger = logging.getLogger("health_api")


def register_system_routes(health_api: Blueprint):
    """Register system health routes on the blueprint."""

    @health_api.get("/")
    @safe_route("Failed to handle health check")
    def ping() -> Response:
        """
        Basic liveness check for monitoring tools.

        Returns:
            200 {"status": "ok", "database": "ok", "timestamp": "..."} or
            500 when the database does not answer.
        """
        if not _database().ping():
            logger.error("Health check failed: database unreachable")
            return _fail(
                "The database is not reachable",
                500,
                title="Unhealthy",
                data={"status": "error", "database": "unreachable", "timestamp": iso_now()},
            )
        return _success({"status": "ok", "database": "ok", "timestamp": iso_now()}, title="Healthy")

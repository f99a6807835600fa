"""
API Authentication Middleware
=============================
Requires a valid bearer token on every ``/api/`` request.

Instead of decorating every individual endpoint, this middleware hooks into
Flask's ``before_request`` pipeline, resolves the token to its user and
stores it on ``flask.g.current_user``. Requests without a valid token are
rejected with a 401 JSON envelope.

Endpoints that must remain public (registration, login, account
verification, password recovery, user listing, health checks) are exempted
by blueprint name or explicit endpoint name.

Usage in ``create_app``::

    from app.middleware.api_auth import init_api_auth

    init_api_auth(flask_app)
"""

from __future__ import annotations

import logging

from flask import Flask, current_app, g, request

from app.security.auth import bearer_token
from app.utils.http import error_response

logger = logging.getLogger(__name__)

# Blueprints that are completely exempt from authentication.
_EXEMPT_BLUEPRINTS: frozenset[str] = frozenset(
    {
        "health_api",  # liveness probe
    }
)

# Individual endpoints that are exempt even inside protected blueprints.
_EXEMPT_ENDPOINTS: frozenset[str] = frozenset(
    {
        "users_api.list_users",
        "users_api.register_user",
        "users_api.verify_account",
        "users_api.resend_verification_code",
        "users_api.login",
        "users_api.request_password_recovery",
        "users_api.reset_password",
    }
)


def init_api_auth(app: Flask) -> None:
    """Register a ``before_request`` hook that authenticates API requests.

    Parameters
    ----------
    app:
        The Flask application instance.
    """

    @app.before_request
    def _authenticate_api_request():
        g.current_user = None
        g.api_token = None

        if not request.path.startswith("/api/") or request.method == "OPTIONS":
            return None

        # Unknown routes fall through to the 404 / 405 handlers.
        if request.endpoint is None:
            return None

        token = bearer_token()
        if token:
            container = current_app.config["CONTAINER"]
            user = container.auth_manager.resolve_token(token)
            if user is not None:
                g.current_user = user
                g.api_token = token
                return None

        if request.blueprint in _EXEMPT_BLUEPRINTS or request.endpoint in _EXEMPT_ENDPOINTS:
            return None

        logger.warning(
            "Blocked unauthenticated %s to %s from %s",
            request.method,
            request.path,
            request.remote_addr,
        )
        message = "Invalid or expired token" if token else "Authentication required"
        return error_response(message, status=401, title="Unauthorized")

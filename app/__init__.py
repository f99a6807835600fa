from __future__ import annotations

import atexit
import logging
import threading
from typing import Any

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from app.blueprints.api.configurations import configuration_types_api, configurations_api
from app.blueprints.api.devices import device_types_api, devices_api, sensor_types_api, sensors_api
from app.blueprints.api.foods import foods_api
from app.blueprints.api.gateway import gateway_api
from app.blueprints.api.habits import habits_api
from app.blueprints.api.health import health_api
from app.blueprints.api.users import users_api
from app.config import load_config, setup_logging
from app.extensions import init_extensions
from app.middleware.api_auth import init_api_auth


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    config = load_config()
    if config_overrides:
        for key, value in config_overrides.items():
            setattr(config, key if hasattr(config, key) else key.lower(), value)

    # Configure logging early so container startup is visible in the
    # terminal and healthy.log.
    setup_logging(debug=config.DEBUG, level=config.log_level, log_path=config.log_path)

    flask_app = Flask(__name__)
    flask_app.config.update(config.as_flask_config())
    flask_app.url_map.strict_slashes = False

    init_extensions(flask_app)

    from app.services.container import ServiceContainer

    container = ServiceContainer.build(config, app=flask_app)
    flask_app.config["CONTAINER"] = container

    # ── Graceful shutdown ───────────────────────────────────────────
    _shutdown_lock = threading.Lock()
    _shutdown_done = False

    def _graceful_shutdown(reason: str = "unknown") -> None:
        nonlocal _shutdown_done
        with _shutdown_lock:
            if _shutdown_done:
                return
            _shutdown_done = True
        logging.info("Graceful shutdown initiated (%s)", reason)
        try:
            container.shutdown()
        except Exception as exc:
            logging.warning("Error during graceful shutdown: %s", exc)

    atexit.register(_graceful_shutdown, "atexit")

    # Require a bearer token on every API endpoint except the public ones
    init_api_auth(flask_app)

    # Global JSON error handler: catches any unhandled exception on /api/
    # routes and returns a generic message instead of leaking stack traces.
    # Domain exceptions carry their own ``http_status``.
    @flask_app.errorhandler(Exception)
    def _handle_unhandled(exc):
        if not request.path.startswith("/api/"):
            if isinstance(exc, HTTPException):
                return exc
            raise exc
        from app.domain.exceptions import HealthyError
        from app.utils.http import error_response, healthy_error_response, safe_error

        if isinstance(exc, HTTPException):
            status = int(exc.code or 500)
            if status >= 500:
                return safe_error(exc, status, context="http-exception")
            return error_response(exc.description or "Request failed", status)

        if isinstance(exc, HealthyError):
            return healthy_error_response(exc, context=type(exc).__name__)

        return safe_error(exc, 500, context="unhandled")

    @flask_app.errorhandler(413)
    def _handle_too_large(_exc):
        from app.utils.http import error_response

        return error_response("Request payload too large", 413)

    # ── API version prefix ──────────────────────────────────────────
    V1 = "/api/v1"

    flask_app.register_blueprint(users_api, url_prefix=f"{V1}/users")
    flask_app.register_blueprint(habits_api, url_prefix=f"{V1}/habits")
    flask_app.register_blueprint(configurations_api, url_prefix=f"{V1}/configurations")
    flask_app.register_blueprint(configuration_types_api, url_prefix=f"{V1}/configuration-types")
    flask_app.register_blueprint(devices_api, url_prefix=f"{V1}/devices")
    flask_app.register_blueprint(device_types_api, url_prefix=f"{V1}/device-types")
    flask_app.register_blueprint(sensors_api, url_prefix=f"{V1}/sensors")
    flask_app.register_blueprint(sensor_types_api, url_prefix=f"{V1}/sensor-types")
    flask_app.register_blueprint(gateway_api, url_prefix=f"{V1}/gateway")
    flask_app.register_blueprint(foods_api, url_prefix=f"{V1}/foods")
    flask_app.register_blueprint(health_api, url_prefix=f"{V1}/health")

    return flask_app

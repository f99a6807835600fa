from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import Response, jsonify

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Generic user-facing messages, never leak internals
# ---------------------------------------------------------------------------
_GENERIC_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict",
    413: "Request payload too large",
    422: "Unprocessable entity",
    500: "An internal error occurred",
    502: "An upstream service failed",
}

_GENERIC_TITLES: dict[int, str] = {
    400: "Bad request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not found",
    405: "Method not allowed",
    409: "Conflict",
    413: "Payload too large",
    422: "Validation failed",
    502: "Upstream error",
}


def safe_error(
    exc: BaseException,
    status: int = 500,
    *,
    context: str = "",
) -> Response:
    """Return a generic error response while logging the real exception.

    Use this instead of ``error_response(str(e), …)`` to prevent internal
    details (file paths, SQL fragments, upstream bodies) from leaking to
    clients.

    Parameters
    ----------
    exc:
        The caught exception, logged server-side, **never** sent to the
        client.
    status:
        HTTP status code for the response (determines the generic message).
    context:
        Optional human-readable context string logged alongside *exc* to
        make server logs easier to triage, e.g. ``"provisioning device"``.
    """
    _log.error("API error [%s] %s: %s", status, context, exc, exc_info=exc)
    message = _GENERIC_MESSAGES.get(status, _GENERIC_MESSAGES[500])
    return error_response(message, status)


def success_response(
    data: Any = None,
    status: int = 200,
    *,
    title: str = "Success",
    message: str = "",
) -> Response:
    payload: dict[str, Any] = {"type": "success", "title": title, "message": message}
    if data is not None:
        payload["data"] = data
    response = jsonify(payload)
    response.status_code = status
    return response


def error_response(
    message: str,
    status: int = 500,
    *,
    title: str | None = None,
    errors: dict | list | None = None,
    data: Any = None,
) -> Response:
    payload: dict[str, Any] = {
        "type": "error",
        "title": title or _GENERIC_TITLES.get(status, "Server error"),
        "message": message,
    }
    if data is not None:
        payload["data"] = data
    if errors:
        payload["errors"] = errors
    response = jsonify(payload)
    response.status_code = status
    return response


def healthy_error_response(exc: Any, *, context: str = "", fallback: str = "Request failed") -> Response:
    """Render a :class:`~app.domain.exceptions.HealthyError` as an envelope.

    4xx errors surface their message (written for the caller); 5xx errors
    are logged and replaced by the generic message for the status.
    """
    status = exc.http_status
    kind = getattr(exc.kind, "value", exc.kind)
    if status >= 500:
        return safe_error(exc, status, context=f"{context or type(exc).__name__} ({kind})")
    _log.info("API %s error [%s] %s: %s", kind, status, context, exc)
    return error_response(
        str(exc) or fallback,
        status,
        title=exc.title,
        errors=exc.errors,
        data=exc.data,
    )


# ---------------------------------------------------------------------------
# Route decorator, eliminates per-route try/except boilerplate
# ---------------------------------------------------------------------------


def safe_route(
    error_message: str = "An internal error occurred",
    *,
    error_status: int = 500,
) -> Callable:
    """Decorator that wraps a Flask route handler with standardized error handling.

    Catches :class:`~app.domain.exceptions.HealthyError` subclasses and maps
    them to the correct HTTP status via ``exc.http_status``. Any other
    ``Exception`` is logged and returns a generic 500.

    Usage::

        @devices_api.post("/provision")
        @safe_route("Failed to provision device")
        def provision_device():
            ...

    Parameters
    ----------
    error_message:
        Fallback message logged for untyped 5xx errors.
    error_status:
        Default HTTP status for non-HealthyError exceptions (default 500).
    """
    from werkzeug.exceptions import HTTPException

    from app.domain.exceptions import HealthyError

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Response:
            try:
                return fn(*args, **kwargs)
            except HTTPException:
                raise
            except HealthyError as exc:
                return healthy_error_response(exc, context=error_message, fallback=error_message)
            except Exception as exc:
                return safe_error(exc, error_status, context=error_message)

        return wrapper

    return decorator

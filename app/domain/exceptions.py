"""Centralized exception hierarchy for the Healthy Habits backend.

All domain and service exceptions inherit from :class:`HealthyError` so that
callers can catch a single base class when they need a broad safety net, yet
still match on specific subclasses where narrower handling is appropriate.

Blueprint-level error handling (see ``app/utils/http.safe_route``) maps these
to the correct HTTP status codes automatically.

Hierarchy
---------
::

    HealthyError (base, maps to 500)
    ├── ValidationError          (422, field-level input errors)
    ├── BadRequestError          (400, request rejected by a business rule)
    ├── AuthenticationError      (401, missing / invalid credentials)
    ├── ForbiddenError           (403, authenticated but not allowed)
    ├── NotFoundError            (404, entity does not exist)
    ├── ConflictError            (409, duplicate / state conflict)
    ├── ServiceError             (500, business-logic failure)
    │   ├── RepositoryError      (500, database / persistence)
    │   └── ExternalServiceError (502, broker or nutrition API)
    └── ConfigurationError       (500, missing or invalid settings)
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error categories, logged with every handled error."""

    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class HealthyError(Exception):
    """Base exception for all application errors.

    Parameters
    ----------
    message:
        Human-readable description. Returned to the client for 4xx errors,
        only logged server-side for 5xx errors.
    errors:
        Optional field-level messages (``{field: [messages]}``) returned
        under the envelope's ``errors`` key.
    data:
        Optional payload returned under the envelope's ``data`` key, e.g.
        both sides of a failed goal comparison.
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    http_status: int = 500
    kind: ErrorKind = ErrorKind.INTERNAL
    title: str = "Error"

    def __init__(
        self,
        message: str = "",
        *,
        errors: dict | None = None,
        data: object | None = None,
        detail: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors
        self.data = data
        self.detail = detail or {}


# ── Client errors (4xx) ──────────────────────────────────────────────


class ValidationError(HealthyError):
    """Caller supplied invalid or incomplete fields (HTTP 422)."""

    http_status: int = 422
    kind = ErrorKind.VALIDATION
    title = "Validation failed"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors={field: [message]})


class BadRequestError(HealthyError):
    """Request is well-formed but rejected by a business rule (HTTP 400)."""

    http_status: int = 400
    kind = ErrorKind.BAD_REQUEST
    title = "Bad request"


class AuthenticationError(HealthyError):
    """Missing, expired or wrong credentials (HTTP 401)."""

    http_status: int = 401
    kind = ErrorKind.UNAUTHORIZED
    title = "Unauthorized"


class ForbiddenError(HealthyError):
    """Authenticated caller may not act on this resource (HTTP 403)."""

    http_status: int = 403
    kind = ErrorKind.FORBIDDEN
    title = "Forbidden"


class NotFoundError(HealthyError):
    """Requested entity does not exist (HTTP 404)."""

    http_status: int = 404
    kind = ErrorKind.NOT_FOUND
    title = "Not found"


class ConflictError(HealthyError):
    """Operation conflicts with existing state (HTTP 409)."""

    http_status: int = 409
    kind = ErrorKind.CONFLICT
    title = "Conflict"


# ── Server errors (5xx) ──────────────────────────────────────────────


class ServiceError(HealthyError):
    """Business-logic failure in a service method (HTTP 500)."""

    http_status: int = 500
    kind = ErrorKind.INTERNAL
    title = "Server error"


class RepositoryError(ServiceError):
    """Database / persistence layer failure (HTTP 500)."""

    http_status: int = 500


class ExternalServiceError(ServiceError):
    """Broker gateway or nutrition API failure (HTTP 502)."""

    http_status: int = 502
    kind = ErrorKind.UPSTREAM
    title = "Upstream error"


class ConfigurationError(HealthyError):
    """Missing or invalid application configuration (HTTP 500)."""

    http_status: int = 500
    kind = ErrorKind.INTERNAL
    title = "Server error"

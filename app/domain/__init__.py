"""
Domain Package
==============
Exception hierarchy and value objects shared by the services and the API.
"""

from .exceptions import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    ErrorKind,
    ExternalServiceError,
    ForbiddenError,
    HealthyError,
    NotFoundError,
    RepositoryError,
    ServiceError,
    ValidationError,
)
from .retained import GoalComparison, decode_retained_payload

__all__ = [
    # Errors
    "HealthyError",
    "ValidationError",
    "BadRequestError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ServiceError",
    "RepositoryError",
    "ExternalServiceError",
    "ConfigurationError",
    "ErrorKind",
    # Broker payloads
    "GoalComparison",
    "decode_retained_payload",
]

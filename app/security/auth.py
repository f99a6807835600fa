from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from flask import g, request

from app.domain.exceptions import AuthenticationError
from app.utils.http import error_response

F = TypeVar("F", bound=Callable[..., object])

_BEARER_PREFIX = "bearer "


def bearer_token() -> Optional[str]:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    header = request.headers.get("Authorization", "")
    if header[: len(_BEARER_PREFIX)].lower() != _BEARER_PREFIX:
        return None
    token = header[len(_BEARER_PREFIX):].strip()
    return token or None


def current_user() -> Optional[Dict[str, Any]]:
    return g.get("current_user")


def current_user_id() -> int:
    """Id of the authenticated user; raises 401 when there is none."""
    user = current_user()
    if not user:
        raise AuthenticationError("Authentication required")
    return int(user["id"])


def current_token() -> Optional[str]:
    return g.get("api_token")


def api_login_required(view_func: F) -> F:
    """Ensure the user is authenticated for API endpoints (returns JSON 401)."""

    @wraps(view_func)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return error_response("Authentication required", status=401)
        return view_func(*args, **kwargs)

    return cast(F, wrapped)

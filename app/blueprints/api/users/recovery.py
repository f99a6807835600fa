"""
Password Recovery Endpoints
===========================

Both endpoints are public: the caller proves ownership of the account with
the code mailed to its address.
"""

from __future__ import annotations

from flask import Response

from app.blueprints.api._common import get_user_service as _user_service, parse_body, success as _success
from app.blueprints.api.users import users_api
from app.schemas import PasswordRecoveryRequest, PasswordResetRequest
from app.utils.http import safe_route


@users_api.post("/password-recovery")
@safe_route("Failed to start password recovery")
def request_password_recovery() -> Response:
    body = parse_body(PasswordRecoveryRequest)
    _user_service().request_password_recovery(body.email)
    return _success(title="Recovery code sent", message="A recovery code was sent to your e-mail address")


@users_api.post("/password-recovery/reset")
@safe_route("Failed to reset password")
def reset_password() -> Response:
    body = parse_body(PasswordResetRequest)
    _user_service().reset_password(
        email=body.email,
        verification_code=body.verification_code,
        new_password=body.new_password,
    )
    return _success(title="Password reset", message="You can now log in with your new password")

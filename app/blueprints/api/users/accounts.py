"""
Account Endpoints
=================

Registration, verification, sessions and profile management.
"""

from __future__ import annotations

import logging

from flask import Response

from app.blueprints.api._common import (
    get_user_service as _user_service,
    parse_body,
    success as _success,
    supplied_fields,
)
from app.blueprints.api.users import users_api
from app.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterUserRequest,
    UpdateProfileRequest,
    VerifyAccountRequest,
)
from app.security.auth import api_login_required, current_token, current_user_id
from app.utils.http import safe_route

logger = logging.getLogger("users_api")


# ============================================================================
# Reads
# ============================================================================


@users_api.get("/")
@safe_route("Failed to list users")
def list_users() -> Response:
    """Users with their devices and sensors attached."""
    return _success(_user_service().list_users(), title="Users")


@users_api.get("/<int:user_id>")
@safe_route("Failed to get user")
def get_user(user_id: int) -> Response:
    return _success(_user_service().get_user(user_id), title="User")


# ============================================================================
# Registration and verification
# ============================================================================


@users_api.post("/")
@safe_route("Failed to register user")
def register_user() -> Response:
    """
    Register a new account.

    A verification code is mailed to the address; the account cannot log in
    until it is verified through ``POST /verify``.
    """
    body = parse_body(RegisterUserRequest)
    user = _user_service().register(
        name=body.name,
        lastname=body.lastname,
        email=body.email,
        password=body.password,
    )
    return _success(
        user,
        201,
        title="User registered",
        message="A verification code was sent to your e-mail address",
    )


@users_api.post("/verify")
@safe_route("Failed to verify account")
def verify_account() -> Response:
    body = parse_body(VerifyAccountRequest)
    user = _user_service().verify_account(
        email=body.email,
        password=body.password,
        verification_code=body.verification_code,
    )
    return _success(user, title="Account verified")


@users_api.post("/<int:user_id>/verification-code")
@safe_route("Failed to send verification code")
def resend_verification_code(user_id: int) -> Response:
    _user_service().resend_verification_code(user_id)
    return _success(title="Verification code sent", message="A new code was sent to your e-mail address")


# ============================================================================
# Sessions
# ============================================================================


@users_api.post("/login")
@safe_route("Failed to log in")
def login() -> Response:
    body = parse_body(LoginRequest)
    result = _user_service().login(email=body.email, password=body.password)
    return _success(result, title="Logged in")


@users_api.post("/logout")
@api_login_required
@safe_route("Failed to log out")
def logout() -> Response:
    _user_service().logout(current_user_id(), current_token())
    return _success(title="Logged out")


# ============================================================================
# Current user
# ============================================================================


@users_api.put("/me")
@api_login_required
@safe_route("Failed to update profile")
def update_profile() -> Response:
    body = parse_body(UpdateProfileRequest)
    user = _user_service().update_profile(current_user_id(), supplied_fields(body))
    return _success(user, title="Profile updated")


@users_api.put("/me/password")
@api_login_required
@safe_route("Failed to change password")
def change_password() -> Response:
    body = parse_body(ChangePasswordRequest)
    _user_service().change_password(
        current_user_id(),
        old_password=body.old_password,
        new_password=body.new_password,
        current_token=current_token(),
    )
    return _success(title="Password changed")


@users_api.delete("/me")
@api_login_required
@safe_route("Failed to delete account")
def delete_current_user() -> Response:
    user_id = current_user_id()
    user = _user_service().delete_user(user_id, requester_id=user_id)
    return _success(user, title="User deleted")


@users_api.delete("/<int:user_id>")
@safe_route("Failed to delete user")
def delete_user(user_id: int) -> Response:
    user = _user_service().delete_user(user_id, requester_id=current_user_id())
    return _success(user, title="User deleted")

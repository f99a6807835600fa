"""
User Service
============
Account lifecycle: registration with e-mail verification codes, login and
logout with opaque tokens, profile and password changes, password recovery
and account deletion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.domain.exceptions import (
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
)
from app.services.application.auth_service import UserAuthManager
from app.services.utilities.email_service import EmailService
from infrastructure.database.repositories.configurations import ConfigurationRepository
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.sensors import SensorRepository
from infrastructure.database.repositories.users import UserRepository

logger = logging.getLogger(__name__)


def _summary(user: Dict[str, Any]) -> Dict[str, Any]:
    return {key: user.get(key) for key in ("id", "name", "lastname", "email")}


@dataclass
class UserService:
    user_repo: UserRepository
    device_repo: DeviceRepository
    sensor_repo: SensorRepository
    configuration_repo: ConfigurationRepository
    auth: UserAuthManager
    email_service: EmailService
    password_min_length: int = 8

    # --- Reads -----------------------------------------------------------------
    def list_users(self) -> List[Dict[str, Any]]:
        users = self.user_repo.list_users()
        for user in users:
            user["devices"] = self._devices_with_sensors(user["id"])
        return users

    def get_user(self, user_id: int) -> Dict[str, Any]:
        user = self._require_user(user_id)
        user["devices"] = self._devices_with_sensors(user_id)
        configurations = self.configuration_repo.list_configurations(user_id)
        types = {row["id"]: row for row in self.configuration_repo.list_types()}
        for configuration in configurations:
            configuration["configuration_type"] = types.get(configuration["configuration_type_id"])
        user["configurations"] = configurations
        return user

    def _devices_with_sensors(self, user_id: int) -> List[Dict[str, Any]]:
        devices = self.device_repo.list_devices(user_id)
        for device in devices:
            device["sensors"] = self.sensor_repo.list_sensors(device["id"])
        return devices

    def _require_user(self, user_id: int, *, with_credentials: bool = False) -> Dict[str, Any]:
        user = self.user_repo.get_user(user_id, with_credentials=with_credentials)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def _check_password_length(self, password: str) -> None:
        if len(password) < self.password_min_length:
            raise BadRequestError(
                f"Password must be at least {self.password_min_length} characters long",
                errors={"password": [f"Must be at least {self.password_min_length} characters long"]},
            )

    # --- Registration / verification -------------------------------------------
    def register(self, *, name: str, lastname: str, email: str, password: str) -> Dict[str, Any]:
        email = email.strip().lower()
        if self.user_repo.get_user_by_email(email) is not None:
            self.auth.audit(email, "register", "conflict")
            raise BadRequestError("E-mail is already registered", errors={"email": ["Already registered"]})
        self._check_password_length(password)

        code = self.auth.generate_code()
        user_id = self.user_repo.create_user(
            name=name,
            lastname=lastname,
            email=email,
            password_hash=self.auth.hash_password(password),
            verification_code=code,
        )
        self.email_service.send_code_email(email, name, code, purpose="verification")
        self.auth.audit(user_id, "register", "success")
        return {"id": user_id, "name": name, "lastname": lastname, "email": email}

    def verify_account(self, *, email: str, password: str, verification_code: str) -> Dict[str, Any]:
        user = self.user_repo.get_user_by_email(email.strip().lower(), with_credentials=True)
        if user is None or not self.auth.codes_match(user.get("verification_code"), verification_code):
            self.auth.audit(email, "verify", "denied")
            raise AuthenticationError("Invalid verification code")
        if not self.auth.check_password(user["password_hash"], password):
            self.auth.audit(user["id"], "verify", "denied")
            raise AuthenticationError("Invalid credentials")

        self.user_repo.mark_verified(user["id"])
        self.auth.audit(user["id"], "verify", "success")
        return _summary(user)

    def resend_verification_code(self, user_id: int) -> None:
        user = self._require_user(user_id)
        code = self.auth.generate_code()
        self.user_repo.set_verification_code(user_id, code)
        self.email_service.send_code_email(user["email"], user["name"], code, purpose="verification")
        logger.info("Verification code regenerated for user %s", user_id)

    # --- Sessions --------------------------------------------------------------
    def login(self, *, email: str, password: str) -> Dict[str, Any]:
        user = self.user_repo.get_user_by_email(email.strip().lower(), with_credentials=True)
        if user is None:
            self.auth.audit(email, "login", "not_found")
            raise AuthenticationError("User not found")
        if not self.auth.check_password(user["password_hash"], password):
            self.auth.audit(user["id"], "login", "denied")
            raise AuthenticationError("Incorrect password")
        if user.get("verification_code") is not None:
            self.auth.audit(user["id"], "login", "unverified")
            raise AuthenticationError("Account is not verified yet. Please verify your account.")

        token = self.auth.issue_token(user["id"])
        self.auth.audit(user["id"], "login", "success")
        return {"token": token, "user": _summary(user)}

    def logout(self, user_id: int, token: str) -> None:
        self.auth.revoke_token(token)
        self.auth.audit(user_id, "logout", "success")

    # --- Profile ---------------------------------------------------------------
    def update_profile(self, user_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        user = self._require_user(user_id)
        changes = {k: v for k, v in fields.items() if v is not None}
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
            other = self.user_repo.get_user_by_email(changes["email"])
            if other is not None and other["id"] != user_id:
                raise BadRequestError("E-mail is already registered", errors={"email": ["Already registered"]})

        if changes:
            self.user_repo.update_profile(user_id, changes)
            updated = self._require_user(user_id)
            self.email_service.send_notice_email(
                updated["email"],
                updated["name"],
                "Your Healthy Habits profile was updated",
                "The details of your account were changed.",
            )
            return updated
        return user

    def change_password(
        self,
        user_id: int,
        *,
        old_password: str,
        new_password: str,
        current_token: Optional[str] = None,
    ) -> None:
        user = self._require_user(user_id, with_credentials=True)
        if not self.auth.check_password(user["password_hash"], old_password):
            self.auth.audit(user_id, "password_change", "denied")
            raise AuthenticationError("Old password is incorrect")
        self._check_password_length(new_password)

        self.user_repo.update_password(user_id, self.auth.hash_password(new_password))
        self.auth.revoke_user_tokens(user_id, keep_token=current_token)
        self.email_service.send_notice_email(
            user["email"],
            user["name"],
            "Your Healthy Habits password was changed",
            "The password of your account was changed.",
        )
        self.auth.audit(user_id, "password_change", "success")

    def delete_user(self, user_id: int, *, requester_id: int) -> Dict[str, Any]:
        user = self._require_user(user_id)
        if user_id != requester_id:
            self.auth.audit(requester_id, "delete_user", "forbidden", target=user_id)
            raise ForbiddenError("You can only delete your own account")
        self.user_repo.delete_user(user_id)
        self.auth.audit(user_id, "delete_user", "success")
        return user

    # --- Password recovery -----------------------------------------------------
    def request_password_recovery(self, email: str) -> None:
        user = self.user_repo.get_user_by_email(email.strip().lower())
        if user is None:
            raise BadRequestError("No account is registered with that e-mail")
        code = self.auth.generate_code()
        self.user_repo.set_verification_code(user["id"], code)
        self.email_service.send_code_email(user["email"], user["name"], code, purpose="recovery")
        self.auth.audit(user["id"], "password_recovery_request", "success")

    def reset_password(self, *, email: str, verification_code: str, new_password: str) -> None:
        user = self.user_repo.get_user_by_email(email.strip().lower(), with_credentials=True)
        if user is None or not self.auth.codes_match(user.get("verification_code"), verification_code):
            self.auth.audit(email, "password_reset", "denied")
            raise AuthenticationError("Invalid recovery code")
        self._check_password_length(new_password)

        self.user_repo.update_password(user["id"], self.auth.hash_password(new_password), clear_code=True)
        self.auth.revoke_user_tokens(user["id"])
        self.auth.audit(user["id"], "password_reset", "success")

"""
User Schemas
============

Pydantic models for account, session and password-recovery requests.
"""

import re
from typing import Annotated, Optional

from pydantic import AfterValidator, Field, StringConstraints, field_validator

from app.schemas.common import RequestModel

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value: str) -> str:
    if not _EMAIL_RE.match(value):
        raise ValueError("Must be a valid e-mail address")
    return value.lower()


Email = Annotated[str, Field(max_length=255), AfterValidator(_check_email)]
# Passwords are taken byte for byte; the model-wide stripping does not apply.
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=1, max_length=128)]
PersonName = Annotated[str, Field(min_length=1, max_length=100)]


class RegisterUserRequest(RequestModel):
    name: PersonName
    lastname: PersonName
    email: Email
    # Minimum length is a business rule answered with 400 by the service.
    password: Password


class _CodeRequest(RequestModel):
    email: Email
    verification_code: str = Field(..., min_length=1, max_length=16)

    @field_validator("verification_code", mode="before")
    @classmethod
    def _code_as_text(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class VerifyAccountRequest(_CodeRequest):
    password: Password


class PasswordResetRequest(_CodeRequest):
    new_password: Password


class LoginRequest(RequestModel):
    email: Email
    password: Password


class UpdateProfileRequest(RequestModel):
    name: Optional[PersonName] = None
    lastname: Optional[PersonName] = None
    email: Optional[Email] = None


class ChangePasswordRequest(RequestModel):
    old_password: Password
    new_password: Password


class PasswordRecoveryRequest(RequestModel):
    email: Email

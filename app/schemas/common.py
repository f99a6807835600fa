"""
Common Schemas
==============

Shared Pydantic models for the response envelope and helpers that turn
pydantic validation failures into field-level messages.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError


class Envelope(BaseModel):
    """Shape of every JSON response body."""

    type: Literal["success", "error"] = Field(..., description="Outcome of the request")
    title: str = Field(..., description="Short human-readable summary")
    message: str = Field(default="", description="Longer human-readable explanation")
    data: Any | None = Field(default=None, description="Payload, when there is one")
    errors: dict[str, list[str]] | None = Field(default=None, description="Field-level messages")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "type": "success",
                "title": "Habit created",
                "message": "",
                "data": {"id": 1, "name": "Walk", "description": "30 minutes"},
            }
        },
    )


class RequestModel(BaseModel):
    """Base for request bodies: unknown keys are ignored, strings stripped."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


def field_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Group pydantic error messages by (dotted) field name."""
    grouped: dict[str, list[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        grouped.setdefault(location, []).append(error.get("msg", "Invalid value"))
    return grouped


def as_text(value: Any) -> Any:
    """Numbers sent where text is stored (goal values, broker payloads) are
    accepted and kept as their decimal text."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value

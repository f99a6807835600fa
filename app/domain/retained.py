"""Decoding of broker retained messages and goal comparison.

The broker gateway returns retained messages with a base64 ``payload``.
Devices publish either JSON scalars (``5000``) or plain text, so the decoded
text is parsed as JSON when possible and kept as text otherwise.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any

from app.domain.exceptions import ExternalServiceError


def decode_retained_payload(payload: str | None) -> Any:
    """Return the decoded value of a base64 retained-message payload.

    Raises:
        ExternalServiceError: payload missing or not a string, not base64,
            or not UTF-8.
    """
    if payload is None:
        raise ExternalServiceError("Retained message has no payload")
    if not isinstance(payload, str):
        raise ExternalServiceError("Retained message payload is not a string")
    try:
        text = base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        # UnicodeDecodeError is a ValueError subclass.
        raise ExternalServiceError("Retained message payload could not be decoded") from exc

    try:
        return json.loads(text)
    except ValueError:
        return text


def reading_as_text(value: Any) -> str:
    """Normalise a decoded reading to the text form stored in configurations."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class GoalComparison:
    """Outcome of comparing a live reading against a stored goal."""

    reading: Any
    goal: str
    unit: str | None = None

    @property
    def reached(self) -> bool:
        return reading_as_text(self.reading) == self.goal

    def to_dict(self) -> dict[str, Any]:
        return {"reading": self.reading, "goal": self.goal, "reached": self.reached, "unit": self.unit}

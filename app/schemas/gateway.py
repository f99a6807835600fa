"""
Gateway and Food Schemas
========================

Pydantic models for broker gateway and nutrition lookup requests.
"""

from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, BeforeValidator, Field

from app.schemas.common import RequestModel, as_text


class RetainedMessageRequest(RequestModel):
    topic: str = Field(..., min_length=1, max_length=255, validation_alias=AliasChoices("topic", "topic_name"))


class PublishRequest(RequestModel):
    topic: str = Field(..., min_length=1, max_length=255, validation_alias=AliasChoices("topic", "topic_name"))
    message: Annotated[str, BeforeValidator(as_text)] = Field(
        ..., max_length=4096, validation_alias=AliasChoices("message", "topic_message")
    )


class ScreenRequest(RequestModel):
    # Range and type are checked by the service so bad values answer 400.
    value: Any = Field(default=None, validation_alias=AliasChoices("value", "topic_message"))


class NutritionRequest(RequestModel):
    ingredients: List[str] = Field(..., min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, max_length=200)

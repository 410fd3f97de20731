from datetime import datetime, timezone

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from bookcafe.models.enum import BookStatus
from bookcafe.schemas.base import BaseSchema


class BookCreate(BaseSchema):
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)

    @field_validator("title", "author", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        # {"title": 1984} is a title; 0 counts as missing, booleans are not text
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
            return str(value)
        return value


class RatingUpdate(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class BookOut(BaseModel):
    """Book as it travels over the wire"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    status: BookStatus
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )
    rating: int = Field(ge=0, le=5)

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        # sqlite hands back naive datetimes, all stored values are UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

"""
Base Schemas.

Shared building blocks for API request/response schemas. Wire field names
are camelCase; Python attribute names stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from nicenote.backend.core.utils import to_iso


class CamelModel(BaseModel):
    """Model serialized with camelCase aliases and readable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimestampedModel(CamelModel):
    """Model carrying createdAt/updatedAt rendered as ISO-8601 with an offset."""

    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return to_iso(value)


class ErrorResponse(BaseModel):
    """Standard error response: a single display string."""

    error: str


class DeleteResponse(BaseModel):
    """Confirmation body returned by DELETE endpoints."""

    success: bool = True

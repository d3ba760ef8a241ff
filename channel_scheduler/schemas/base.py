"""Base Pydantic schemas with common patterns.

This module defines the base schema configuration and the shared
response fields used by the scheduling schemas.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Required at runtime for Pydantic
from typing import Annotated
from uuid import UUID  # noqa: TC003 - Required at runtime for Pydantic

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from channel_scheduler.models.base import to_utc

UTCTimestamp = Annotated[datetime, AfterValidator(to_utc)]
"""ISO-8601 timestamp normalized to aware UTC (naive input is taken as UTC)."""


class BaseSchema(BaseModel):
    """Base schema with common configuration for all schemas.

    Configures Pydantic v2 settings for consistent behavior across all schemas.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class BaseResponse(BaseSchema):
    """Base response schema with common fields.

    Includes id, created_at, and updated_at fields common to most responses.
    """

    id: UUID = Field(
        ...,
        description="Unique identifier (UUID v4)",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    created_at: datetime = Field(
        ...,
        description="Timestamp when the resource was created",
        examples=["2024-01-15T10:30:00Z"],
    )
    updated_at: datetime = Field(
        ...,
        description="Timestamp when the resource was last updated",
        examples=["2024-01-15T12:45:00Z"],
    )


__all__ = [
    "BaseResponse",
    "BaseSchema",
    "UTCTimestamp",
]

"""
Base schema classes and the shared error envelope.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from provider_availability.utils.date_utils import to_business_date

__all__ = [
    "BaseSchema",
    "ErrorBody",
    "ErrorResponse",
    "parse_business_date",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All request and response schemas inherit from this.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


def parse_business_date(value: Any) -> Optional[date]:
    """
    `mode="before"` validator body for business date fields.

    Accepts dates, timestamps and ISO-8601 strings; raises ValueError so
    pydantic reports a field error.
    """
    if value is None:
        return None
    return to_business_date(value)


class ErrorBody(BaseSchema):
    code: str = Field(..., description="Machine readable error code")
    message: str = Field(..., description="Human readable message")
    details: Dict[str, Any] = Field(default_factory=dict)
    type: str = Field(..., description="Exception class that produced the error")


class ErrorResponse(BaseSchema):
    """Envelope returned for every failed request."""

    error: ErrorBody

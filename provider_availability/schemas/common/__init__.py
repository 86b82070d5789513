from provider_availability.schemas.common.base import (
    BaseSchema,
    ErrorBody,
    ErrorResponse,
    parse_business_date,
)

__all__ = ["BaseSchema", "ErrorBody", "ErrorResponse", "parse_business_date"]

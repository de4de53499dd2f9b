"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "listing_id",
                "message": "Must be a valid UUID format",
                "code": "INVALID_UUID",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Simple error:
            {
                "detail": "Listing not found",
                "code": "NOT_FOUND"
            }

        Storage outage:
            {
                "detail": "Listing storage is unavailable",
                "code": "STORAGE_UNAVAILABLE"
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Listing not found", "code": "NOT_FOUND"},
                {
                    "detail": "Invalid listing id",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "listing_id",
                            "message": "Must be a valid UUID format",
                            "code": "INVALID_UUID",
                        }
                    ],
                },
                {"detail": "Listing storage is unavailable", "code": "STORAGE_UNAVAILABLE"},
            ]
        }
    )

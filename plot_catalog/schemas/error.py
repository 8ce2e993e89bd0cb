"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error")
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier")
    input: Optional[Any] = Field(None, description="Input value that caused the error")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier")
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking")
    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Detailed error information for validation errors"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


# status code -> (description, error code, example message)
_ERROR_EXAMPLES = {
    400: ("Bad Request - Invalid request parameters", "BAD_REQUEST", "No valid rows found."),
    401: ("Unauthorized - Authentication required", "UNAUTHORIZED", "Unauthorized."),
    403: ("Forbidden - Caller is not on the admin allow-list", "FORBIDDEN", "Forbidden."),
    404: ("Not Found - Resource does not exist", "NOT_FOUND", "Listing not found."),
    409: ("Conflict - Resource state changed", "CONFLICT", "Listing already approved."),
    422: ("Unprocessable Entity - Validation failed", "VALIDATION_ERROR", "Request validation failed"),
    500: ("Internal Server Error", "DATABASE_ERROR", "Database operation failed"),
    502: ("Bad Gateway - Upstream service failed", "UPSTREAM_ERROR", "Geocoding failed."),
}


def _error_response(status_code: int) -> Dict[str, Any]:
    description, code, message = _ERROR_EXAMPLES[status_code]
    return {
        "description": description,
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": code,
                        "message": message,
                        "timestamp": "2024-01-01T00:00:00Z",
                        "request_id": "abc12345"
                    }
                }
            }
        }
    }


COMMON_ERROR_RESPONSES = {code: _error_response(code) for code in _ERROR_EXAMPLES}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_admin_error_responses(*extra: int) -> Dict[int, Dict[str, Any]]:
    """Admin endpoints: auth errors, server errors, plus the given codes."""
    return get_error_responses(401, 403, 500, *extra)

"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["external_id"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Field required"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["missing"]
    )

    input: Optional[Any] = Field(
        None,
        description="Input value that caused the error"
    )


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message", examples=["Request validation failed"])
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2025-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Detailed error information for validation errors")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(..., description="Error information")


def _example(code: str, message: str, details: Optional[list] = None) -> Dict[str, Any]:
    error = {
        "code": code,
        "message": message,
        "timestamp": "2025-01-01T00:00:00Z",
        "request_id": "abc12345",
    }
    if details:
        error["details"] = details
    return {"error": error}


# Common error response examples for documentation
COMMON_ERROR_RESPONSES = {
    400: {
        "description": "Bad Request - Invalid request parameters",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    "bad_request": {
                        "summary": "Bad Request Example",
                        "value": _example("BAD_REQUEST", "Developer name is required"),
                    },
                    "file_too_large": {
                        "summary": "Upload Too Large",
                        "value": _example("BAD_REQUEST", "File too large. Maximum size for images is 5MB"),
                    },
                }
            }
        }
    },
    401: {
        "description": "Unauthorized - Dashboard session or upload secret required",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    "unauthorized": {
                        "summary": "Authentication Required",
                        "value": _example("UNAUTHORIZED", "Authentication required"),
                    },
                    "token_expired": {
                        "summary": "Session Expired",
                        "value": _example("UNAUTHORIZED", "Session has expired"),
                    },
                }
            }
        }
    },
    403: {
        "description": "Forbidden - Access denied",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("FORBIDDEN", "Access forbidden")
            }
        }
    },
    404: {
        "description": "Not Found - Resource not found",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    "property_not_found": {
                        "summary": "Property Not Found",
                        "value": _example("NOT_FOUND", "Property not found with ID: marina-heights"),
                    },
                    "developer_not_found": {
                        "summary": "Developer Not Found",
                        "value": _example("NOT_FOUND", "Developer not found with ID: 42"),
                    },
                }
            }
        }
    },
    409: {
        "description": "Conflict - Resource conflict",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    "duplicate_property": {
                        "summary": "Duplicate External ID",
                        "value": _example(
                            "CONFLICT",
                            'Property with external_id "PRJ-001" already exists. '
                            "Please use a different external ID."
                        ),
                    },
                    "developer_in_use": {
                        "summary": "Developer Still Referenced",
                        "value": _example(
                            "CONFLICT",
                            "Cannot delete developer: properties are associated with this developer"
                        ),
                    },
                }
            }
        }
    },
    422: {
        "description": "Unprocessable Entity - Validation error",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example(
                    "VALIDATION_ERROR",
                    "Request validation failed",
                    [{"field": "fileName", "message": "Field required", "type": "missing"}],
                )
            }
        }
    },
    500: {
        "description": "Internal Server Error - Unexpected error",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later.")
            }
        }
    },
    502: {
        "description": "Bad Gateway - Object storage call failed",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("STORAGE_ERROR", "Failed to generate upload URL")
            }
        }
    },
    503: {
        "description": "Service Unavailable - Service temporarily unavailable",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("SERVICE_UNAVAILABLE", "Service temporarily unavailable")
            }
        }
    },
}


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


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get common error response schemas for most endpoints."""
    return get_error_responses(400, 404, 422, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 404, 409, 422, 500)


def get_upload_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for upload endpoints."""
    return get_error_responses(400, 401, 422, 500, 502, 503)

"""
Custom exception classes for the listing admin API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Validation error exception."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Access forbidden exception."""

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN"
        )


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="BAD_REQUEST"
        )


class ServiceUnavailableError(APIException):
    """Service unavailable exception."""

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code="SERVICE_UNAVAILABLE"
        )


# Dashboard authentication exceptions
class InvalidTokenError(UnauthorizedError):
    """Invalid or expired dashboard session token."""

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class TokenExpiredError(UnauthorizedError):
    """Dashboard session token expired."""

    def __init__(self, detail: str = "Session has expired"):
        super().__init__(detail)


class InvalidTwoFactorCodeError(UnauthorizedError):
    """Rejected TOTP code."""

    def __init__(self, detail: str = "Invalid verification code"):
        super().__init__(detail)


class TwoFactorNotConfiguredError(APIException):
    """No TOTP secret has been set up yet."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Two-factor authentication is not configured",
            error_code="TWO_FACTOR_NOT_CONFIGURED"
        )


class InvalidUploadSecretError(UnauthorizedError):
    """Missing or wrong X-Upload-Secret header."""

    def __init__(self):
        super().__init__("Unauthorized")


# Property specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self, identifier: str):
        super().__init__("Property", identifier)


class DuplicatePropertyError(ConflictError):
    """A property with the same external ID already exists."""

    def __init__(self, external_id: str):
        super().__init__(
            f'Property with external_id "{external_id}" already exists. '
            f"Please use a different external ID."
        )
        self.external_id = external_id


# Developer specific exceptions
class DeveloperNotFoundError(NotFoundError):
    """Developer not found exception."""

    def __init__(self, developer_id: str):
        super().__init__("Developer", developer_id)


class DuplicateDeveloperError(ConflictError):
    """Developer name already taken."""

    def __init__(self, name: str, another: bool = False):
        if another:
            super().__init__(f'Another developer with name "{name}" already exists')
        else:
            super().__init__(f'Developer "{name}" already exists')


class DeveloperInUseError(ConflictError):
    """Developer still referenced by properties."""

    def __init__(self):
        super().__init__("Cannot delete developer: properties are associated with this developer")


# File upload exceptions
class FileUploadError(BadRequestError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(BadRequestError):
    """Unsupported file type exception."""

    def __init__(self, category: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Invalid file type. Allowed types for {category}: {supported}")


class FileSizeExceededError(BadRequestError):
    """File size exceeded exception."""

    def __init__(self, category: str, max_size: int, size: Optional[int] = None):
        max_mb = max_size // (1024 * 1024)
        detail = f"File too large. Maximum size for {category}s is {max_mb}MB"
        if size is not None:
            from propzing.utils.file_utils import format_file_size
            detail += f". Your file is {format_file_size(size)}."
        super().__init__(detail)


class StorageConfigurationError(ServiceUnavailableError):
    """Object storage credentials are missing."""

    def __init__(self):
        super().__init__("Upload configuration missing. Object storage credentials are not set.")


class StorageError(APIException):
    """Object storage call failed."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code="STORAGE_ERROR"
        )

"""
Utility modules for the listing admin API.
"""

from .auth import (
    create_dashboard_token,
    verify_dashboard_token,
    DashboardSession,
)

from .conversions import (
    m2_to_sqft,
    sqft_to_m2,
    convert_to_aed,
    parse_coordinates,
    generate_hash_id,
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    TokenExpiredError,
    InvalidTokenError,
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_dashboard_token",
    "verify_dashboard_token",
    "DashboardSession",

    # Conversions
    "m2_to_sqft",
    "sqft_to_m2",
    "convert_to_aed",
    "parse_coordinates",
    "generate_hash_id",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "TokenExpiredError",
    "InvalidTokenError",
]

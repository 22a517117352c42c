"""
API route handlers for the listing admin API.
"""

from .properties import router as properties_router
from .developers import router as developers_router
from .uploads import router as uploads_router
from .analytics import router as analytics_router
from .auth import router as auth_router

__all__ = [
    "properties_router",
    "developers_router",
    "uploads_router",
    "analytics_router",
    "auth_router",
]

"""
Service layer for business logic implementation.
Contains services for submissions, entry ingestion, properties, developers, uploads,
analytics, dashboard authentication and error handling.
"""

from .submission import PropertySubmissionService
from .entry import PropertyEntryService
from .property import PropertyService
from .developer import DeveloperService
from .storage import StorageService
from .analytics import AnalyticsService
from .auth import DashboardAuthService
from .error_handler import ErrorHandlerService

__all__ = [
    "PropertySubmissionService",
    "PropertyEntryService",
    "PropertyService",
    "DeveloperService",
    "StorageService",
    "AnalyticsService",
    "DashboardAuthService",
    "ErrorHandlerService",
]

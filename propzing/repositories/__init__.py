"""
Repository layer for data access operations.
Wraps async SQLAlchemy queries with logging and rollback on failure.
"""

from propzing.repositories.base import BaseRepository
from propzing.repositories.property import PropertyRepository, PropertySearchFilters
from propzing.repositories.developer import DeveloperRepository, DataSourceRepository
from propzing.repositories.facility import FacilityRepository
from propzing.repositories.analytics import AnalyticsRepository
from propzing.repositories.auth import TwoFactorSecretRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "DeveloperRepository",
    "DataSourceRepository",
    "FacilityRepository",
    "AnalyticsRepository",
    "TwoFactorSecretRepository",
]

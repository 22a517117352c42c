"""
Database models for the listing admin API.
Properties with their child tables, shared reference rows, analytics and dashboard auth.
"""

from propzing.models.developer import PartnerDeveloper, DataSource
from propzing.models.facility import Facility, PropertyFacility
from propzing.models.property import (
    Property,
    PropertyImage,
    PropertyUnitBlock,
    PropertyBuilding,
    PropertyMapPoint,
    PropertyPaymentPlan,
    PaymentPlanValue,
    ImageCategory,
)
from propzing.models.analytics import VisitorFingerprint, UserSession, UserActivityEvent, EventType
from propzing.models.auth import DashboardTwoFactorSecret

__all__ = [
    "PartnerDeveloper",
    "DataSource",
    "Facility",
    "PropertyFacility",
    "Property",
    "PropertyImage",
    "PropertyUnitBlock",
    "PropertyBuilding",
    "PropertyMapPoint",
    "PropertyPaymentPlan",
    "PaymentPlanValue",
    "ImageCategory",
    "VisitorFingerprint",
    "UserSession",
    "UserActivityEvent",
    "EventType",
    "DashboardTwoFactorSecret",
]

"""
Pydantic schemas for request/response validation.
"""

# Wizard and submission schemas
from .wizard import WizardFormData, WizardValidationError, WizardValidationResponse
from .submission import SectionReport, SubmissionDetails, SubmissionResult
from .entry import PropertyEntryRequest, PropertyEntryResponse

# Structured property form and payload schemas
from .property_form import PropertyFormData, PropertyPayload, ValidationIssue, PayloadPreviewResponse

# Dashboard schemas
from .property import (
    PropertyResponse,
    PropertyDetailsResponse,
    PropertyListResponse,
    PropertyFilterOptions,
    PropertyUpdate,
)
from .developer import DeveloperCreate, DeveloperUpdate, DeveloperResponse, DeveloperListResponse
from .upload import PresignRequest, PresignResponse, UploadResponse
from .auth import TwoFactorSetupResponse, TwoFactorVerifyRequest, DashboardTokenResponse

__all__ = [
    # Wizard and submission
    "WizardFormData",
    "WizardValidationError",
    "WizardValidationResponse",
    "SectionReport",
    "SubmissionDetails",
    "SubmissionResult",
    "PropertyEntryRequest",
    "PropertyEntryResponse",

    # Property form
    "PropertyFormData",
    "PropertyPayload",
    "ValidationIssue",
    "PayloadPreviewResponse",

    # Dashboard
    "PropertyResponse",
    "PropertyDetailsResponse",
    "PropertyListResponse",
    "PropertyFilterOptions",
    "PropertyUpdate",
    "DeveloperCreate",
    "DeveloperUpdate",
    "DeveloperResponse",
    "DeveloperListResponse",
    "PresignRequest",
    "PresignResponse",
    "UploadResponse",
    "TwoFactorSetupResponse",
    "TwoFactorVerifyRequest",
    "DashboardTokenResponse",
]

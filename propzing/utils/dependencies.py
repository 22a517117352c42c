"""
FastAPI dependency injection utilities for services, dashboard sessions and upload secrets.
"""

from typing import Optional
import hmac
from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import ExpiredSignatureError, JWTError
from propzing.database import get_db
from propzing.config import settings
from propzing.services.property import PropertyService
from propzing.services.developer import DeveloperService
from propzing.services.submission import PropertySubmissionService
from propzing.services.entry import PropertyEntryService
from propzing.services.storage import StorageService
from propzing.services.analytics import AnalyticsService
from propzing.services.auth import DashboardAuthService
from propzing.utils.auth import DashboardSession, verify_dashboard_token
from propzing.utils.exceptions import (
    UnauthorizedError,
    InvalidTokenError,
    TokenExpiredError,
    InvalidUploadSecretError,
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_developer_service(db: AsyncSession = Depends(get_db)) -> DeveloperService:
    return DeveloperService(db)


async def get_submission_service(db: AsyncSession = Depends(get_db)) -> PropertySubmissionService:
    return PropertySubmissionService(db)


async def get_entry_service(db: AsyncSession = Depends(get_db)) -> PropertyEntryService:
    return PropertyEntryService(db)


async def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> DashboardAuthService:
    return DashboardAuthService(db)


def get_storage_service() -> StorageService:
    return StorageService()


async def get_dashboard_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> DashboardSession:
    """
    Require a dashboard token obtained through two-factor verification.

    Raises:
        UnauthorizedError: If no token is provided
        TokenExpiredError: If the token has expired
        InvalidTokenError: If the token is malformed or not a dashboard token
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return verify_dashboard_token(credentials.credentials)
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()


async def verify_upload_secret(
    upload_secret: Optional[str] = Header(None, alias="X-Upload-Secret")
) -> None:
    """
    Check the shared upload secret sent by the data-entry UI.

    Raises:
        InvalidUploadSecretError: If the header is missing, wrong, or no secret is configured
    """
    expected = settings.upload_secret
    if not expected or not upload_secret or not hmac.compare_digest(upload_secret.encode(), expected.encode()):
        raise InvalidUploadSecretError()

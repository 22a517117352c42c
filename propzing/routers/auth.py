"""
Dashboard two-factor authentication endpoints.
"""

from fastapi import APIRouter, Depends, status
from typing import Optional

from propzing.services.auth import DashboardAuthService
from propzing.schemas.auth import (
    TwoFactorStatusResponse,
    TwoFactorSetupRequest,
    TwoFactorSetupResponse,
    TwoFactorVerifyRequest,
    DashboardTokenResponse,
)
from propzing.schemas.error import get_error_responses, get_auth_error_responses
from propzing.utils.dependencies import get_auth_service


router = APIRouter(prefix="/auth/2fa", tags=["Authentication"])


@router.get(
    "/status",
    response_model=TwoFactorStatusResponse,
    summary="Whether two-factor authentication is configured"
)
async def get_status(
    auth_service: DashboardAuthService = Depends(get_auth_service)
) -> TwoFactorStatusResponse:
    return await auth_service.status()


@router.post(
    "/setup",
    response_model=TwoFactorSetupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Set up or rotate the dashboard TOTP secret",
    description="The first setup is open; replacing an existing secret needs a valid current code.",
    responses=get_auth_error_responses()
)
async def setup_two_factor(
    request: Optional[TwoFactorSetupRequest] = None,
    auth_service: DashboardAuthService = Depends(get_auth_service)
) -> TwoFactorSetupResponse:
    return await auth_service.setup(request.code if request else None)


@router.post(
    "/verify",
    response_model=DashboardTokenResponse,
    summary="Exchange a TOTP code for a dashboard token",
    responses=get_error_responses(401, 409, 422)
)
async def verify_two_factor(
    request: TwoFactorVerifyRequest,
    auth_service: DashboardAuthService = Depends(get_auth_service)
) -> DashboardTokenResponse:
    """
    Verify a 6-digit code from the authenticator app.

    The returned token goes in the Authorization header as `Bearer <token>`
    for developer, property update and analytics routes.
    """
    return await auth_service.verify(request.code)

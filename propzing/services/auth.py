"""
Dashboard two-factor authentication.
Manages the shared TOTP secret and exchanges valid codes for dashboard session tokens.
"""

from typing import Optional
import pyotp
from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.auth import TwoFactorSecretRepository
from propzing.schemas.auth import TwoFactorStatusResponse, TwoFactorSetupResponse, DashboardTokenResponse
from propzing.utils.auth import create_dashboard_token
from propzing.utils.exceptions import (
    APIException,
    BadRequestError,
    ForbiddenError,
    InvalidTwoFactorCodeError,
    TwoFactorNotConfiguredError,
)
from propzing.config import settings
import logging

logger = logging.getLogger(__name__)


class DashboardAuthService:
    """TOTP setup and verification for the admin dashboard."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.secret_repo = TwoFactorSecretRepository(db_session)

    @staticmethod
    def _code_matches(secret: str, code: Optional[str]) -> bool:
        if not code:
            return False
        return pyotp.TOTP(secret).verify(code, valid_window=settings.totp_valid_window)

    async def status(self) -> TwoFactorStatusResponse:
        return TwoFactorStatusResponse(configured=await self.secret_repo.get_latest() is not None)

    async def setup(self, code: Optional[str] = None) -> TwoFactorSetupResponse:
        """
        Generate and store a new TOTP secret.

        Args:
            code: Current code, required when a secret already exists

        Raises:
            ForbiddenError: If a secret exists and no code was given
            InvalidTwoFactorCodeError: If a secret exists and the code does not match it
        """
        try:
            current = await self.secret_repo.get_latest()
            if current is not None:
                if not code:
                    raise ForbiddenError("Two-factor authentication is already configured")
                if not self._code_matches(current.secret, code):
                    logger.warning("Rejected 2FA secret rotation with an invalid code")
                    raise InvalidTwoFactorCodeError()

            secret = pyotp.random_base32()
            await self.secret_repo.add_secret(secret)

            uri = pyotp.TOTP(secret).provisioning_uri(
                name=settings.totp_account_name,
                issuer_name=settings.totp_issuer
            )
            logger.info("Dashboard 2FA secret configured")
            return TwoFactorSetupResponse(secret=secret, provisioning_uri=uri, issuer=settings.totp_issuer)

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to set up dashboard 2FA: {e}")
            raise BadRequestError(f"Failed to set up two-factor authentication: {str(e)}")

    async def verify(self, code: str) -> DashboardTokenResponse:
        """
        Exchange a TOTP code for a dashboard access token.

        Raises:
            TwoFactorNotConfiguredError: If no secret has been set up
            InvalidTwoFactorCodeError: If the code does not match
        """
        current = await self.secret_repo.get_latest()
        if current is None:
            raise TwoFactorNotConfiguredError()

        if not self._code_matches(current.secret, code):
            logger.warning("Dashboard 2FA verification failed")
            raise InvalidTwoFactorCodeError()

        logger.info("Dashboard 2FA verification succeeded")
        return DashboardTokenResponse(
            access_token=create_dashboard_token(),
            expires_in=settings.dashboard_session_minutes * 60,
        )

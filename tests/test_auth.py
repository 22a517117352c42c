"""
Tests for dashboard two-factor authentication and session tokens.
"""

import pyotp
import pytest
from datetime import timedelta
from jose import ExpiredSignatureError, JWTError, jwt

from propzing.config import settings
from propzing.services.auth import DashboardAuthService
from propzing.utils.auth import create_dashboard_token, verify_dashboard_token, DASHBOARD_SCOPE
from propzing.utils.exceptions import (
    ForbiddenError,
    InvalidTwoFactorCodeError,
    TwoFactorNotConfiguredError,
)
from propzing.schemas.auth import TwoFactorVerifyRequest


def wrong_code(secret: str) -> str:
    return f"{(int(pyotp.TOTP(secret).now()) + 500000) % 1000000:06d}"


class TestDashboardTokens:

    def test_token_round_trip(self):
        session = verify_dashboard_token(create_dashboard_token())

        assert session.scope == DASHBOARD_SCOPE
        assert session.session_id

    def test_expired_token(self):
        token = create_dashboard_token(expires_delta=timedelta(seconds=-10))

        with pytest.raises(ExpiredSignatureError):
            verify_dashboard_token(token)

    def test_token_signed_with_other_key(self):
        token = jwt.encode(
            {"sub": "x", "scope": DASHBOARD_SCOPE, "type": "access"},
            "another-secret-key-that-is-long-enough-000",
            algorithm="HS256"
        )
        with pytest.raises(JWTError):
            verify_dashboard_token(token)

    def test_token_without_dashboard_scope(self):
        token = jwt.encode(
            {"sub": "x", "scope": "public", "type": "access"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm
        )
        with pytest.raises(JWTError):
            verify_dashboard_token(token)


class TestTwoFactorService:
    """TOTP setup and verification."""

    @pytest.mark.asyncio
    async def test_status_before_setup(self, auth_service: DashboardAuthService):
        status = await auth_service.status()
        assert status.configured is False

    @pytest.mark.asyncio
    async def test_first_setup(self, auth_service: DashboardAuthService):
        response = await auth_service.setup()

        assert len(response.secret) >= 16
        assert response.provisioning_uri.startswith("otpauth://totp/")
        assert f"secret={response.secret}" in response.provisioning_uri
        assert response.issuer == settings.totp_issuer
        assert (await auth_service.status()).configured is True

    @pytest.mark.asyncio
    async def test_setup_again_requires_code(self, auth_service: DashboardAuthService):
        await auth_service.setup()

        with pytest.raises(ForbiddenError):
            await auth_service.setup()

    @pytest.mark.asyncio
    async def test_rotation_with_wrong_code(self, auth_service: DashboardAuthService):
        first = await auth_service.setup()

        with pytest.raises(InvalidTwoFactorCodeError):
            await auth_service.setup(code=wrong_code(first.secret))

    @pytest.mark.asyncio
    async def test_rotation_with_valid_code(self, auth_service: DashboardAuthService):
        first = await auth_service.setup()

        second = await auth_service.setup(code=pyotp.TOTP(first.secret).now())

        assert second.secret != first.secret
        token = await auth_service.verify(pyotp.TOTP(second.secret).now())
        assert token.access_token

    @pytest.mark.asyncio
    async def test_verify_issues_token(self, auth_service: DashboardAuthService):
        setup = await auth_service.setup()

        response = await auth_service.verify(pyotp.TOTP(setup.secret).now())

        assert response.token_type == "bearer"
        assert response.expires_in == settings.dashboard_session_minutes * 60
        assert verify_dashboard_token(response.access_token).scope == DASHBOARD_SCOPE

    @pytest.mark.asyncio
    async def test_verify_wrong_code(self, auth_service: DashboardAuthService):
        setup = await auth_service.setup()

        with pytest.raises(InvalidTwoFactorCodeError):
            await auth_service.verify(wrong_code(setup.secret))

    @pytest.mark.asyncio
    async def test_verify_without_setup(self, auth_service: DashboardAuthService):
        with pytest.raises(TwoFactorNotConfiguredError):
            await auth_service.verify("123456")


class TestVerifyRequest:

    def test_code_spaces_removed(self):
        assert TwoFactorVerifyRequest(code=" 123 456 ").code == "123456"

    @pytest.mark.parametrize("code", ["12345", "1234567", "abcdef"])
    def test_invalid_codes(self, code):
        with pytest.raises(ValueError):
            TwoFactorVerifyRequest(code=code)

"""
Pydantic schemas for dashboard two-factor authentication.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional


class TwoFactorStatusResponse(BaseModel):
    configured: bool = Field(..., description="Whether a TOTP secret has been set up")


class TwoFactorSetupRequest(BaseModel):
    """Replacing an existing secret requires a valid code for it."""

    code: Optional[str] = Field(None, description="Current 6-digit code, required to rotate the secret")


class TwoFactorSetupResponse(BaseModel):
    secret: str = Field(..., description="Base32 TOTP secret")
    provisioning_uri: str = Field(..., description="otpauth:// URI for authenticator apps")
    issuer: str


class TwoFactorVerifyRequest(BaseModel):
    code: str = Field(..., description="6-digit code from the authenticator app", examples=["123456"])

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        """Codes are exactly 6 digits; surrounding spaces are ignored."""
        v = v.strip().replace(" ", "")
        if len(v) != 6 or not v.isdigit():
            raise ValueError("Code must be 6 digits")
        return v


class DashboardTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")

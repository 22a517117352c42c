"""
Dashboard session token utilities.
Issues and validates the JWT handed out after a successful two-factor verification.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from propzing.config import settings
import uuid


DASHBOARD_SCOPE = "dashboard"


class DashboardSession:
    """Decoded dashboard token payload."""

    def __init__(self, session_id: str, scope: str, exp: datetime):
        self.session_id = session_id
        self.scope = scope
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardSession":
        return cls(
            session_id=data["sub"],
            scope=data["scope"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def create_dashboard_token(expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a dashboard access token.

    Args:
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.dashboard_session_minutes))

    to_encode = {
        "sub": str(uuid.uuid4()),  # One id per verified session
        "scope": DASHBOARD_SCOPE,
        "exp": expire,
        "iat": now,
        "type": "access"
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def verify_dashboard_token(token: str) -> DashboardSession:
    """
    Verify and decode a dashboard token.

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If the token is malformed, signed with another key or lacks the dashboard scope
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm]
    )

    if payload.get("type") != "access" or payload.get("scope") != DASHBOARD_SCOPE:
        raise JWTError("Invalid token scope")

    if not payload.get("sub"):
        raise JWTError("Invalid token payload")

    return DashboardSession.from_dict(payload)


"""
Dashboard two-factor secret storage.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from propzing.database import Base


class DashboardTwoFactorSecret(Base):
    """Shared TOTP secret for the admin dashboard; the newest row wins."""

    __tablename__ = "dashboard_2fa_secrets"

    secret: Mapped[str] = mapped_column(String(64), nullable=False)

    def __repr__(self) -> str:
        # Never render the secret itself
        return f"<DashboardTwoFactorSecret(id={self.id})>"

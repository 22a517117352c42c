"""
Repository for the dashboard TOTP secret.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from propzing.repositories.base import BaseRepository
from propzing.models.auth import DashboardTwoFactorSecret
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class TwoFactorSecretRepository(BaseRepository[DashboardTwoFactorSecret]):

    def __init__(self, db: AsyncSession):
        super().__init__(DashboardTwoFactorSecret, db)

    async def get_latest(self) -> Optional[DashboardTwoFactorSecret]:
        """Newest stored secret; older rows are ignored."""
        try:
            query = (
                select(DashboardTwoFactorSecret)
                .order_by(desc(DashboardTwoFactorSecret.created_at), desc(DashboardTwoFactorSecret.id))
                .limit(1)
            )
            result = await self.db.execute(query)
            return result.scalars().first()
        except Exception as e:
            logger.error(f"Failed to load dashboard 2FA secret: {e}")
            raise

    async def add_secret(self, secret: str) -> DashboardTwoFactorSecret:
        record = await self.create({"secret": secret})
        logger.info("Stored new dashboard 2FA secret")
        return record

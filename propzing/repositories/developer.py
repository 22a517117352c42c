"""
Repositories for partner developers and data sources.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from propzing.repositories.base import BaseRepository
from propzing.models.developer import PartnerDeveloper, DataSource
from propzing.models.property import Property
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)


class DeveloperRepository(BaseRepository[PartnerDeveloper]):
    """Repository for partner developers; names are unique."""

    def __init__(self, db: AsyncSession):
        super().__init__(PartnerDeveloper, db)

    async def get_by_name(self, name: str) -> Optional[PartnerDeveloper]:
        return await self.get_by_field("name", name)

    async def name_taken_by_other(self, name: str, developer_id: int) -> bool:
        """Check whether another developer already uses this name."""
        try:
            query = select(func.count(PartnerDeveloper.id)).where(
                PartnerDeveloper.name == name,
                PartnerDeveloper.id != developer_id
            )
            result = await self.db.execute(query)
            return (result.scalar() or 0) > 0
        except Exception as e:
            logger.error(f"Failed to check developer name {name}: {e}")
            raise

    async def list_ordered(self) -> List[PartnerDeveloper]:
        """All developers ordered by name."""
        try:
            result = await self.db.execute(select(PartnerDeveloper).order_by(PartnerDeveloper.name))
            developers = list(result.scalars().all())
            logger.debug(f"Retrieved {len(developers)} developers")
            return developers
        except Exception as e:
            logger.error(f"Failed to list developers: {e}")
            raise

    async def list_names(self) -> List[str]:
        """Non-blank developer names, sorted."""
        developers = await self.list_ordered()
        return sorted({d.name.strip() for d in developers if d.name and d.name.strip()})

    async def has_properties(self, developer_id: int) -> bool:
        """Check whether any property references this developer."""
        try:
            query = select(func.count(Property.id)).where(Property.developer_id == developer_id)
            result = await self.db.execute(query)
            return (result.scalar() or 0) > 0
        except Exception as e:
            logger.error(f"Failed to check properties for developer {developer_id}: {e}")
            raise


class DataSourceRepository(BaseRepository[DataSource]):
    """Repository for data source reference rows."""

    def __init__(self, db: AsyncSession):
        super().__init__(DataSource, db)

    async def get_or_create(self, name: str, description: Optional[str] = None) -> DataSource:
        """Look up a data source by name, inserting it when missing."""
        existing = await self.get_by_field("name", name)
        if existing:
            return existing

        source = await self.create({"name": name, "description": description})
        logger.info(f"Created data source: {name} (ID: {source.id})")
        return source

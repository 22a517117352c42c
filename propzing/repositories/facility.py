"""
Repository for the shared facility table and property links.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.base import BaseRepository
from propzing.models.facility import Facility, PropertyFacility
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class FacilityRepository(BaseRepository[Facility]):
    """Facilities are looked up by exact name and created on first use."""

    def __init__(self, db: AsyncSession):
        super().__init__(Facility, db)

    async def get_or_create_by_name(self, name: str) -> Facility:
        existing = await self.get_by_field("name", name)
        if existing:
            logger.debug(f"Reusing facility {name} (ID: {existing.id})")
            return existing

        facility = await self.create({"name": name})
        logger.info(f"Created facility: {name} (ID: {facility.id})")
        return facility

    async def link(
        self,
        property_id: int,
        facility_id: int,
        image_url: Optional[str] = None,
        image_source: Optional[str] = None
    ) -> PropertyFacility:
        """Attach a facility to a property with its property-specific image."""
        try:
            link = PropertyFacility(
                property_id=property_id,
                facility_id=facility_id,
                image_url=image_url,
                image_source=image_source,
            )
            self.db.add(link)
            await self.db.commit()
            await self.db.refresh(link)
            return link
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to link facility {facility_id} to property {property_id}: {e}")
            raise

"""
Property repository for listings and their child rows.
Provides search for the dashboard table and the inserts used by the submission pipelines.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func, desc
from sqlalchemy.orm import selectinload
from propzing.repositories.base import BaseRepository
from propzing.models.property import (
    Property,
    PropertyImage,
    PropertyUnitBlock,
    PropertyBuilding,
    PropertyMapPoint,
    PropertyPaymentPlan,
    PaymentPlanValue,
)
from propzing.models.developer import PartnerDeveloper
from propzing.models.facility import PropertyFacility
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Data class for dashboard property search filters."""

    def __init__(
        self,
        search_text: Optional[str] = None,
        status: Optional[str] = None,
        area: Optional[str] = None,
        developer: Optional[str] = None
    ):
        self.search_text = search_text.strip() if search_text else None
        self.status = status or None
        self.area = area or None
        self.developer = developer or None


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for properties.
    Child rows are written through the same session so one submission shares a transaction scope.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def get_by_external_id(self, external_id: str) -> Optional[Property]:
        return await self.get_by_field("external_id", external_id)

    async def get_by_slug(self, slug: str) -> Optional[Property]:
        return await self.get_by_field("slug", slug)

    async def exists_external_id(self, external_id: str) -> bool:
        """Check whether a property with this external id is already stored."""
        try:
            query = select(func.count(Property.id)).where(Property.external_id == external_id)
            result = await self.db.execute(query)
            return (result.scalar() or 0) > 0
        except Exception as e:
            logger.error(f"Failed to check external id {external_id}: {e}")
            raise

    async def get_with_details(self, property_id: int) -> Optional[Property]:
        """
        Get property with every related collection loaded.

        Args:
            property_id: Integer id of the property

        Returns:
            Property with loaded relationships or None if not found
        """
        try:
            query = (
                select(Property)
                .options(
                    selectinload(Property.developer),
                    selectinload(Property.images),
                    selectinload(Property.unit_blocks),
                    selectinload(Property.buildings),
                    selectinload(Property.facility_links).selectinload(PropertyFacility.facility),
                    selectinload(Property.map_points),
                    selectinload(Property.payment_plans).selectinload(PropertyPaymentPlan.values),
                )
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )

            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with details: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination, newest first.

        Args:
            filters: PropertySearchFilters instance with search criteria
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = select(Property).outerjoin(PartnerDeveloper, Property.developer_id == PartnerDeveloper.id)
            count_query = (
                select(func.count(Property.id))
                .select_from(Property)
                .outerjoin(PartnerDeveloper, Property.developer_id == PartnerDeveloper.id)
            )

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar() or 0

            query = query.order_by(desc(Property.created_at), desc(Property.id)).offset(skip).limit(limit)

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """Build SQLAlchemy filter conditions from search filters."""
        conditions = []

        if filters.search_text:
            pattern = f"%{filters.search_text}%"
            conditions.append(
                or_(
                    Property.name.ilike(pattern),
                    PartnerDeveloper.name.ilike(pattern),
                    Property.area.ilike(pattern),
                    Property.external_id.ilike(pattern),
                )
            )

        if filters.status:
            conditions.append(Property.status == filters.status)

        if filters.area:
            conditions.append(Property.area == filters.area)

        if filters.developer:
            conditions.append(PartnerDeveloper.name == filters.developer)

        return conditions

    async def get_distinct_values(self, column_name: str) -> List[str]:
        """Distinct non-blank values of a text column, sorted."""
        try:
            column = getattr(Property, column_name)
            query = select(column).where(column.is_not(None)).distinct().order_by(column)
            result = await self.db.execute(query)
            values = {value.strip() for value in result.scalars().all() if value and value.strip()}
            return sorted(values)
        except Exception as e:
            logger.error(f"Failed to get distinct {column_name} values: {e}")
            raise

    async def add_images(self, property_id: int, images: List[Dict[str, Any]]) -> List[PropertyImage]:
        """
        Insert image rows for a property.

        Args:
            property_id: Owning property id
            images: Dicts with image_url and category
        """
        return await self._add_children(
            PropertyImage,
            [{"property_id": property_id, **image} for image in images]
        )

    async def add_unit_blocks(self, property_id: int, blocks: List[Dict[str, Any]]) -> List[PropertyUnitBlock]:
        return await self._add_children(
            PropertyUnitBlock,
            [{"property_id": property_id, **block} for block in blocks]
        )

    async def add_buildings(self, property_id: int, buildings: List[Dict[str, Any]]) -> List[PropertyBuilding]:
        return await self._add_children(
            PropertyBuilding,
            [{"property_id": property_id, **building} for building in buildings]
        )

    async def add_map_points(self, property_id: int, points: List[Dict[str, Any]]) -> List[PropertyMapPoint]:
        return await self._add_children(
            PropertyMapPoint,
            [{"property_id": property_id, **point} for point in points]
        )

    async def add_payment_plan(
        self,
        property_id: int,
        plan_data: Dict[str, Any],
        values: List[Dict[str, Any]]
    ) -> int:
        """
        Insert a payment plan and its step values together.

        Returns:
            Id of the created plan
        """
        try:
            plan = PropertyPaymentPlan(property_id=property_id, **plan_data)
            self.db.add(plan)
            await self.db.flush()
            plan_id = plan.id

            self.db.add_all([
                PaymentPlanValue(property_payment_plan_id=plan_id, **value) for value in values
            ])
            await self.db.commit()

            logger.debug(f"Created payment plan {plan_id} with {len(values)} values for property {property_id}")
            return plan_id
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create payment plan for property {property_id}: {e}")
            raise

    async def _add_children(self, model, rows: List[Dict[str, Any]]) -> List:
        """Insert child rows in one commit; rolls back and re-raises on failure."""
        if not rows:
            return []
        try:
            objects = [model(**row) for row in rows]
            self.db.add_all(objects)
            await self.db.commit()
            logger.debug(f"Created {len(objects)} {model.__name__} rows")
            return objects
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create {model.__name__} rows: {e}")
            raise

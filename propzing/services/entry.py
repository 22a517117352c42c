"""
Bulk property entry.
Stores a whole project from one structured request, using hash-derived ids so re-imports map to the same rows.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.property import PropertyRepository
from propzing.repositories.developer import DeveloperRepository
from propzing.repositories.facility import FacilityRepository
from propzing.schemas.entry import PropertyEntryRequest, PropertyEntryResponse, EntryDeveloper, EntryProperty
from propzing.schemas.submission import SectionReport
from propzing.models.property import ImageCategory
from propzing.utils.conversions import generate_hash_id, parse_coordinates, split_list
import logging

logger = logging.getLogger(__name__)

DEVELOPER_FIELDS = ("email", "phone", "office_address", "website", "logo_url", "description", "working_hours")


class EntryRejected(Exception):
    """The entry cannot be stored; reported to the caller as a 400."""


class PropertyEntryService:
    """Ingests a structured property entry into the property tables."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.developer_repo = DeveloperRepository(db_session)
        self.facility_repo = FacilityRepository(db_session)

    async def ingest(self, request: PropertyEntryRequest) -> PropertyEntryResponse:
        """
        Store a property entry.

        The property row is required; every related section is best-effort and
        its failures are logged and reported without aborting the entry.

        Args:
            request: Property, related rows and developer details

        Returns:
            PropertyEntryResponse with success False when the property could not be stored
        """
        prop = request.property
        logger.info(f"Received property entry request: {prop.name}")

        try:
            if await self.property_repo.exists_external_id(prop.external_id):
                raise EntryRejected(f"Property with external_id {prop.external_id} already exists")

            property_id = generate_hash_id(prop.external_id)
            developer_id = await self._upsert_developer(request.developer)
            await self._insert_property(property_id, developer_id, prop)
        except EntryRejected as e:
            logger.error(f"Property entry rejected: {e}")
            return PropertyEntryResponse(success=False, error=str(e))

        logger.info(f"Property inserted with ID: {property_id}")

        sections = [
            await self._insert_unit_blocks(property_id, prop.external_id, request),
            await self._insert_buildings(property_id, prop.external_id, request),
            await self._insert_facilities(property_id, request),
            await self._insert_map_points(property_id, request),
            await self._insert_images(property_id, prop, request.images),
            await self._insert_payment_plans(property_id, prop.external_id, request),
        ]

        return PropertyEntryResponse(
            success=True,
            property_id=property_id,
            message=f'Property "{prop.name}" successfully added!',
            sections=sections,
        )

    async def _upsert_developer(self, developer: EntryDeveloper) -> Optional[int]:
        """
        Match the developer by name.

        An existing developer is only updated when contact details are supplied, and
        then only with the non-empty fields. A failed insert leaves the property
        without a developer.
        """
        if not developer.name:
            return None

        existing = await self.developer_repo.get_by_name(developer.name)
        if existing:
            developer_id = existing.id
            if developer.email or developer.phone or developer.website:
                changes = {
                    field: getattr(developer, field)
                    for field in DEVELOPER_FIELDS
                    if getattr(developer, field)
                }
                try:
                    await self.developer_repo.update(existing, changes)
                    logger.info(f"Updated developer {developer.name} (ID: {developer_id})")
                except Exception as e:
                    logger.warning(f"Developer update failed for {developer.name}: {e}")
            return developer_id

        try:
            created = await self.developer_repo.create({
                "name": developer.name,
                **{field: getattr(developer, field) for field in DEVELOPER_FIELDS},
            })
            logger.info(f"Created developer {created.name} (ID: {created.id})")
            return created.id
        except Exception as e:
            logger.error(f"Developer insert error: {e}")
            return None

    async def _insert_property(self, property_id: int, developer_id: Optional[int], prop: EntryProperty) -> None:
        latitude, longitude = parse_coordinates(prop.coordinates)
        row = {
            "id": property_id,
            "external_id": prop.external_id,
            "name": prop.name,
            "slug": prop.slug or None,
            "developer_id": developer_id,
            "area": prop.area,
            "city": prop.city or None,
            "country": prop.country or None,
            "latitude": latitude,
            "longitude": longitude,
            "coordinates_text": prop.coordinates or None,
            "website": prop.website or None,
            "status": prop.status,
            "sale_status": prop.sale_status or None,
            "completion_datetime": prop.completion_datetime or None,
            "readiness": prop.readiness,
            "min_price": prop.min_price,
            "max_price": prop.max_price,
            "price_currency": prop.price_currency,
            "service_charge": prop.service_charge or None,
            "min_area": prop.min_area,
            "max_area": prop.max_area,
            "area_unit": prop.area_unit,
            "furnishing": prop.furnishing or None,
            "has_escrow": bool(prop.has_escrow),
            "post_handover": bool(prop.post_handover),
            "cover_url": prop.cover_url or None,
            "video_url": prop.video_url or None,
            "brochure_url": prop.brochure_url or None,
            "layouts_pdf": prop.layouts_pdf or None,
            "parking": prop.parking_specs or None,
            "overview": prop.overview or None,
            "changelog": [],
        }

        try:
            await self.property_repo.create(row)
        except Exception as e:
            raise EntryRejected(f"Property insert failed: {e}")

    async def _insert_rows(self, report: SectionReport, insert, property_id: int, rows: List[Dict[str, Any]]):
        """Run one bulk insert, recording the outcome on the report."""
        if not rows:
            return report
        try:
            await insert(property_id, rows)
            report.inserted = len(rows)
            logger.info(f"Inserted {len(rows)} {report.section} for property {property_id}")
        except Exception as e:
            logger.warning(f"{report.section} insert error for property {property_id}: {e}")
            report.record_failure(f"Failed to insert {report.section}: {e}", count=len(rows))
        return report

    async def _insert_unit_blocks(self, property_id: int, external_id: str, request: PropertyEntryRequest) -> SectionReport:
        rows = [
            {
                "external_id": str(generate_hash_id(f"{external_id}-{unit.unit_type}-{unit.unit_bedrooms}")),
                "unit_type": unit.unit_type,
                "normalized_type": unit.normalized_type or None,
                "unit_bedrooms": unit.unit_bedrooms,
                "units_amount": unit.units_amount,
                "units_area_from_m2": unit.units_area_from_m2,
                "units_area_to_m2": unit.units_area_to_m2,
                "units_price_from": unit.units_price_from,
                "units_price_to": unit.units_price_to,
                "typical_unit_image_url": unit.typical_unit_image_url or None,
            }
            for unit in request.unit_types
        ]
        return await self._insert_rows(
            SectionReport(section="unit_blocks"), self.property_repo.add_unit_blocks, property_id, rows
        )

    async def _insert_buildings(self, property_id: int, external_id: str, request: PropertyEntryRequest) -> SectionReport:
        rows = [
            {
                "external_id": str(generate_hash_id(f"{external_id}-building-{building.building_name}")),
                "name": building.building_name,
                "description": building.building_description or None,
                "completion_date": building.building_completion_date or None,
                "image_url": building.building_image_url or None,
            }
            for building in request.buildings
            if building.building_name
        ]
        return await self._insert_rows(
            SectionReport(section="buildings"), self.property_repo.add_buildings, property_id, rows
        )

    async def _insert_facilities(self, property_id: int, request: PropertyEntryRequest) -> SectionReport:
        report = SectionReport(section="facilities")

        for facility in request.facilities:
            if not facility.facility_name:
                continue
            try:
                facility_row = await self.facility_repo.get_or_create_by_name(facility.facility_name)
                await self.facility_repo.link(
                    property_id,
                    facility_row.id,
                    image_url=facility.facility_image_url or None,
                    image_source=facility.facility_image_source or None,
                )
                report.inserted += 1
            except Exception as e:
                logger.warning(f"Facility {facility.facility_name} failed for property {property_id}: {e}")
                report.record_failure(f'Failed to add facility "{facility.facility_name}": {e}')

        logger.info(f"Processed {len(request.facilities)} facilities")
        return report

    async def _insert_map_points(self, property_id: int, request: PropertyEntryRequest) -> SectionReport:
        named_points = [point for point in request.map_points if point.poi_name]
        rows = [
            {"name": point.poi_name, "distance_km": point.distance_km, "sequence": index}
            for index, point in enumerate(named_points, start=1)
        ]
        return await self._insert_rows(
            SectionReport(section="map_points"), self.property_repo.add_map_points, property_id, rows
        )

    async def _insert_images(self, property_id: int, prop: EntryProperty, images: Optional[str]) -> SectionReport:
        report = SectionReport(section="images")

        rows = [
            {"image_url": url, "category": ImageCategory.ADDITIONAL.value}
            for url in split_list(images, separators="\n,")
        ]
        await self._insert_rows(report, self.property_repo.add_images, property_id, rows)

        # Cover is stored on its own so a bad gallery does not lose it
        if prop.cover_url:
            try:
                await self.property_repo.add_images(
                    property_id, [{"image_url": prop.cover_url, "category": ImageCategory.COVER.value}]
                )
                report.inserted += 1
            except Exception as e:
                logger.warning(f"Cover image insert error for property {property_id}: {e}")
                report.record_failure(f"Failed to insert cover image: {e}")

        return report

    async def _insert_payment_plans(self, property_id: int, external_id: str, request: PropertyEntryRequest) -> SectionReport:
        report = SectionReport(section="payment_plans")

        for plan in request.payment_plans:
            if not plan.payment_plan_name:
                continue

            plan_id = generate_hash_id(f"{external_id}-plan-{plan.payment_plan_name}")
            description = (
                f"{plan.months_after_handover} months after handover" if plan.months_after_handover else None
            )
            values = [
                {
                    "id": generate_hash_id(f"{plan_id}-step-{index}"),
                    "name": step,
                    "value_raw": step,
                    "sequence": index + 1,
                }
                for index, step in enumerate(split_list(plan.payment_steps, separators="|"))
            ]

            try:
                await self.property_repo.add_payment_plan(
                    property_id,
                    {"id": plan_id, "name": plan.payment_plan_name, "description": description},
                    values
                )
                report.inserted += 1
            except Exception as e:
                logger.warning(f"Payment plan insert error for {plan.payment_plan_name}: {e}")
                report.record_failure(f'Failed to insert payment plan "{plan.payment_plan_name}": {e}')

        logger.info(f"Processed {len(request.payment_plans)} payment plans")
        return report

"""
Wizard submission pipeline.
Validates the wizard state, inserts the property and fans the related rows out into their tables.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.property import PropertyRepository
from propzing.repositories.developer import DeveloperRepository, DataSourceRepository
from propzing.repositories.facility import FacilityRepository
from propzing.schemas.wizard import WizardFormData
from propzing.schemas.submission import SectionReport, SubmissionDetails, SubmissionResult
from propzing.models.property import ImageCategory
from propzing.utils.validators import validate_form_data, format_validation_errors
from propzing.utils.conversions import (
    convert_to_aed,
    price_to_aed,
    parse_coordinates,
    split_list,
    is_persistent_url,
    clean_str,
)
from propzing.utils.exceptions import DuplicatePropertyError
from propzing.config import settings
import logging

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Property created successfully with all related data"


class SubmissionAborted(Exception):
    """Fatal step failure; the submission stops and reports this message."""


class PropertySubmissionService:
    """
    Stores a wizard submission across the property tables.

    The property row and the unit blocks and buildings are required; a failure there
    stops the submission. Images, facilities, map points and payment plans are
    best-effort: failures are recorded in the section reports and the pipeline continues.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.developer_repo = DeveloperRepository(db_session)
        self.source_repo = DataSourceRepository(db_session)
        self.facility_repo = FacilityRepository(db_session)

    async def submit_property(self, form: WizardFormData) -> SubmissionResult:
        """
        Validate and store a wizard submission.

        Args:
            form: Complete wizard state

        Returns:
            SubmissionResult; data problems are reported here rather than raised
        """
        errors = validate_form_data(form)
        if errors:
            message = format_validation_errors(errors)
            logger.info(f"Wizard submission rejected with {len(errors)} validation errors")
            return SubmissionResult(
                success=False,
                error=message,
                details=SubmissionDetails(message=message, validation_errors=errors),
            )

        sections: List[SectionReport] = []
        property_id: Optional[int] = None
        try:
            await self._check_developer(form.developer_id)
            await self._check_duplicate(form.external_id)

            property_id = await self._insert_property(form)

            sections.append(await self._insert_images(property_id, form))

            source_id = await self._resolve_source_id()
            sections.append(await self._insert_unit_blocks(property_id, source_id, form))
            sections.append(await self._insert_buildings(property_id, form))
            sections.append(await self._insert_facilities(property_id, form))
            sections.append(await self._insert_map_points(property_id, source_id, form))
            sections.append(await self._insert_payment_plans(property_id, form))
        except SubmissionAborted as e:
            logger.error(f"Property submission failed: {e}")
            return SubmissionResult(
                success=False,
                property_id=property_id,
                error=str(e),
                details=SubmissionDetails(message=str(e), sections=sections),
            )

        details = SubmissionDetails(message=SUCCESS_MESSAGE, sections=sections)
        if details.has_partial_failures:
            logger.warning(f"Property {property_id} stored with partial failures")
        else:
            logger.info(f"Property {property_id} stored with all related data")

        return SubmissionResult(success=True, property_id=property_id, details=details)

    async def _check_developer(self, developer_id: Optional[int]) -> None:
        if not developer_id:
            return
        if not await self.developer_repo.exists(developer_id):
            raise SubmissionAborted(
                f"Developer with ID {developer_id} not found. Please select a valid developer."
            )

    async def _check_duplicate(self, external_id: Optional[str]) -> None:
        if await self.property_repo.exists_external_id(external_id):
            raise SubmissionAborted(DuplicatePropertyError(external_id).detail)

    def _property_row(self, form: WizardFormData) -> Dict[str, Any]:
        currency = form.price_currency
        latitude, longitude = parse_coordinates(form.coordinates)

        return {
            "external_id": form.external_id,
            "name": form.name,
            "slug": form.slug or None,
            "developer_id": form.developer_id or None,
            "area": form.area,
            "city": form.city or None,
            "country": form.country or None,
            "website": form.website or None,
            "status": form.status,
            "sale_status": form.sale_status or None,
            "completion_datetime": form.completion_datetime or None,
            "readiness": form.readiness,
            "permit_id": form.permit_id or None,
            "min_price": form.min_price,
            "max_price": form.max_price,
            "min_price_aed": form.min_price if currency == settings.base_currency else price_to_aed(form.min_price, currency),
            "max_price_aed": form.max_price if currency == settings.base_currency else price_to_aed(form.max_price, currency),
            "price_currency": currency,
            "service_charge": form.service_charge or None,
            "min_area": form.min_area,
            "max_area": form.max_area,
            "area_unit": form.area_unit,
            "furnishing": form.furnishing or None,
            "has_escrow": bool(form.has_escrow),
            "post_handover": bool(form.post_handover),
            "coordinates_text": form.coordinates or None,
            "latitude": latitude,
            "longitude": longitude,
            "parking": clean_str(form.parking_specs),
            "video_url": form.video_url.strip() if is_persistent_url(form.video_url) else None,
            "brochure_url": form.brochure_url.strip() if is_persistent_url(form.brochure_url) else None,
            "layouts_pdf": form.layouts_pdf.strip() if is_persistent_url(form.layouts_pdf) else None,
            "cover_url": clean_str(form.cover_url),
            "overview": form.overview or None,
            "changelog": [],
        }

    async def _insert_property(self, form: WizardFormData) -> int:
        try:
            property_obj = await self.property_repo.create(self._property_row(form))
        except Exception as e:
            raise SubmissionAborted(f"Failed to create property: {e}")

        logger.info(f"Created property: {property_obj.name} (ID: {property_obj.id})")
        return property_obj.id

    async def _resolve_source_id(self) -> Optional[int]:
        """Id of the manual-entry data source, created on first use."""
        try:
            source = await self.source_repo.get_or_create(settings.manual_entry_source)
            return source.id
        except Exception as e:
            logger.warning(f"Could not resolve data source {settings.manual_entry_source}: {e}")
            return None

    async def _insert_images(self, property_id: int, form: WizardFormData) -> SectionReport:
        report = SectionReport(section="images")

        images = []
        cover = clean_str(form.cover_url)
        if cover:
            images.append({"image_url": cover, "category": ImageCategory.COVER.value})
        for url in split_list(form.image_urls):
            images.append({"image_url": url, "category": ImageCategory.ADDITIONAL.value})

        if not images:
            return report

        try:
            await self.property_repo.add_images(property_id, images)
            report.inserted = len(images)
        except Exception as e:
            logger.warning(f"Failed to insert property images for property {property_id}: {e}")
            report.record_failure(f"Failed to insert property images: {e}", count=len(images))
        return report

    async def _insert_unit_blocks(
        self,
        property_id: int,
        source_id: Optional[int],
        form: WizardFormData
    ) -> SectionReport:
        report = SectionReport(section="unit_blocks")
        currency = form.price_currency or settings.base_currency

        blocks = [
            {
                "source_id": source_id,
                "external_id": unit.id or None,
                "unit_type": unit.unit_type.strip(),
                "normalized_type": unit.normalized_type or None,
                "unit_bedrooms": unit.unit_bedrooms.strip(),
                "units_amount": unit.units_amount or None,
                "units_area_from_m2": unit.units_area_from_m2 or None,
                "units_area_to_m2": unit.units_area_to_m2 or None,
                "units_price_from": unit.units_price_from or None,
                "units_price_to": unit.units_price_to or None,
                "price_currency": currency,
                "units_price_from_aed": convert_to_aed(unit.units_price_from, currency),
                "units_price_to_aed": convert_to_aed(unit.units_price_to, currency),
                "typical_unit_image_url": unit.typical_unit_image_url or None,
            }
            for unit in form.unit_types
            if clean_str(unit.unit_type) and clean_str(unit.unit_bedrooms)
        ]

        if not blocks:
            return report

        try:
            await self.property_repo.add_unit_blocks(property_id, blocks)
        except Exception as e:
            raise SubmissionAborted(f"Failed to insert unit blocks: {e}")

        report.inserted = len(blocks)
        return report

    async def _insert_buildings(self, property_id: int, form: WizardFormData) -> SectionReport:
        report = SectionReport(section="buildings")

        buildings = [
            {
                "external_id": building.id or None,
                "name": building.building_name.strip(),
                "description": building.building_description or None,
                "completion_date": building.building_completion_date or None,
                "image_url": building.building_image_url or None,
            }
            for building in form.buildings
            if clean_str(building.building_name)
        ]

        if not buildings:
            return report

        try:
            await self.property_repo.add_buildings(property_id, buildings)
        except Exception as e:
            raise SubmissionAborted(f"Failed to insert buildings: {e}")

        report.inserted = len(buildings)
        return report

    async def _insert_facilities(self, property_id: int, form: WizardFormData) -> SectionReport:
        report = SectionReport(section="facilities")

        for facility in form.facilities:
            name = facility.facility_name
            try:
                facility_row = await self.facility_repo.get_or_create_by_name(name)
                facility_id = facility_row.id
            except Exception as e:
                logger.warning(f'Failed to create facility "{name}": {e}')
                report.record_failure(f'Failed to create facility "{name}": {e}')
                continue

            try:
                await self.facility_repo.link(
                    property_id,
                    facility_id,
                    image_url=facility.facility_image_url or None,
                    image_source=facility.facility_image_source or None,
                )
                report.inserted += 1
            except Exception as e:
                logger.warning(f'Failed to link facility "{name}": {e}')
                report.record_failure(f'Failed to link facility "{name}": {e}')

        return report

    async def _insert_map_points(
        self,
        property_id: int,
        source_id: Optional[int],
        form: WizardFormData
    ) -> SectionReport:
        report = SectionReport(section="map_points")

        named_points = [point for point in form.map_points if clean_str(point.poi_name)]
        points = [
            {
                "source_id": source_id,
                "name": str(point.poi_name).strip(),
                "distance_km": float(point.distance_km) if point.distance_km is not None else None,
                "sequence": index,
            }
            for index, point in enumerate(named_points, start=1)
        ]

        if not points:
            return report

        try:
            await self.property_repo.add_map_points(property_id, points)
            report.inserted = len(points)
            logger.info(f"Inserted {len(points)} map points for property {property_id}")
        except Exception as e:
            # Map points are optional; the submission carries on without them
            logger.warning(f"Failed to insert map points for property {property_id}: {e}")
            report.record_failure(f"Failed to insert map points: {e}", count=len(points))
        return report

    async def _insert_payment_plans(self, property_id: int, form: WizardFormData) -> SectionReport:
        report = SectionReport(section="payment_plans")

        for plan in form.payment_plans:
            name = clean_str(plan.payment_plan_name)
            if not name:
                continue

            values = [
                {"name": f"Step {index}", "value_raw": step, "sequence": index}
                for index, step in enumerate(split_list(plan.payment_steps), start=1)
            ]

            try:
                await self.property_repo.add_payment_plan(property_id, {"name": name}, values)
                report.inserted += 1
            except Exception as e:
                logger.warning(f'Failed to insert payment plan "{name}": {e}')
                report.record_failure(f'Failed to insert payment plan "{name}": {e}')

        return report

"""
Tests for the wizard submission pipeline.
"""

import pytest
from sqlalchemy import select, func

from propzing.models.developer import DataSource
from propzing.models.facility import Facility
from propzing.repositories.property import PropertyRepository
from propzing.repositories.developer import DeveloperRepository
from propzing.services.submission import PropertySubmissionService, SUCCESS_MESSAGE
from tests.conftest import WizardFactory, DeveloperFactory


class TestSubmitProperty:
    """End-to-end submission into the property tables."""

    @pytest.mark.asyncio
    async def test_submit_success(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        """A valid wizard is stored with every related section."""
        form = WizardFactory.create_wizard_form()

        result = await submission_service.submit_property(form)

        assert result.success is True
        assert result.property_id is not None
        assert result.error is None
        assert result.details.message == SUCCESS_MESSAGE
        assert [section.section for section in result.details.sections] == [
            "images", "unit_blocks", "buildings", "facilities", "map_points", "payment_plans"
        ]
        inserted = {section.section: section.inserted for section in result.details.sections}
        assert inserted == {
            "images": 3,
            "unit_blocks": 1,
            "buildings": 1,
            "facilities": 1,
            "map_points": 2,
            "payment_plans": 1,
        }
        assert not result.details.has_partial_failures

    @pytest.mark.asyncio
    async def test_submitted_property_columns(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        form = WizardFactory.create_wizard_form()
        result = await submission_service.submit_property(form)

        stored = await property_repository.get_with_details(result.property_id)

        assert stored.external_id == form.external_id
        assert stored.parking == "1 space per unit"
        assert stored.latitude == pytest.approx(25.2048)
        assert stored.longitude == pytest.approx(55.2708)
        assert stored.min_price == 1000000
        assert stored.min_price_aed == 1000000
        assert stored.max_price_aed == 2000000
        assert stored.cover_url == "https://cdn.emaar.ae/cover.jpg"
        assert stored.changelog == []

    @pytest.mark.asyncio
    async def test_related_rows(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        result = await submission_service.submit_property(WizardFactory.create_wizard_form())
        stored = await property_repository.get_with_details(result.property_id)

        categories = sorted(image.category for image in stored.images)
        assert categories == ["additional", "additional", "cover"]

        block = stored.unit_blocks[0]
        assert block.unit_type == "Apartment"
        assert block.external_id == "unit-1"
        assert block.price_currency == "AED"
        assert block.units_price_from_aed == 1000000

        assert [point.name for point in stored.map_points] == ["Dubai Mall", "DXB Airport"]
        assert [point.sequence for point in stored.map_points] == [1, 2]

        assert stored.facility_links[0].facility.name == "Pool"
        assert stored.facility_links[0].image_url == "https://cdn.emaar.ae/pool.jpg"

        plan = stored.payment_plans[0]
        assert plan.name == "60/40"
        assert [(value.name, value.value_raw, value.sequence) for value in plan.values] == [
            ("Step 1", "10% booking", 1),
            ("Step 2", "50% construction", 2),
            ("Step 3", "40% handover", 3),
        ]

    @pytest.mark.asyncio
    async def test_manual_entry_source_created_once(self, submission_service: PropertySubmissionService, db_session):
        await submission_service.submit_property(WizardFactory.create_wizard_form())
        await submission_service.submit_property(WizardFactory.create_wizard_form())

        result = await db_session.execute(select(func.count(DataSource.id)).where(DataSource.name == "manual-entry"))
        assert result.scalar() == 1

    @pytest.mark.asyncio
    async def test_facilities_are_reused_by_name(self, submission_service: PropertySubmissionService, db_session):
        await submission_service.submit_property(WizardFactory.create_wizard_form())
        await submission_service.submit_property(WizardFactory.create_wizard_form())

        result = await db_session.execute(select(func.count(Facility.id)).where(Facility.name == "Pool"))
        assert result.scalar() == 1

    @pytest.mark.asyncio
    async def test_foreign_currency_prices(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        form = WizardFactory.create_wizard_form(price_currency="USD", min_price=100000, max_price=200000)
        result = await submission_service.submit_property(form)
        stored = await property_repository.get_with_details(result.property_id)

        assert stored.min_price == 100000
        assert stored.min_price_aed == 367000.0
        assert stored.max_price_aed == 734000.0
        assert stored.unit_blocks[0].price_currency == "USD"
        assert stored.unit_blocks[0].units_price_from_aed == 3670000.0

    @pytest.mark.asyncio
    async def test_temporary_media_urls_not_stored(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        form = WizardFactory.create_wizard_form(
            video_url="blob:http://localhost:5173/3f2a",
            brochure_url="https://cdn.emaar.ae/brochure.pdf",
        )
        result = await submission_service.submit_property(form)
        stored = await property_repository.get_by_id(result.property_id)

        assert stored.video_url is None
        assert stored.brochure_url == "https://cdn.emaar.ae/brochure.pdf"

    @pytest.mark.asyncio
    async def test_rows_without_names_are_skipped(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        form = WizardFactory.create_wizard_form(buildings=[], paymentPlans=[], mapPoints=[], facilities=[])
        result = await submission_service.submit_property(form)

        inserted = {section.section: section.inserted for section in result.details.sections}
        assert inserted["buildings"] == 0
        assert inserted["payment_plans"] == 0
        assert inserted["map_points"] == 0

    @pytest.mark.asyncio
    async def test_existing_developer_is_linked(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository,
        developer_repository: DeveloperRepository
    ):
        developer = await DeveloperFactory.create_developer(developer_repository, "Sobha Realty")
        developer_id = developer.id

        result = await submission_service.submit_property(
            WizardFactory.create_wizard_form(developer="", developer_id=developer_id)
        )
        stored = await property_repository.get_with_details(result.property_id)

        assert stored.developer_id == developer_id
        assert stored.developer.name == "Sobha Realty"


class TestSubmitPropertyFailures:
    """Submissions that are refused."""

    @pytest.mark.asyncio
    async def test_validation_errors_are_reported(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        form = WizardFactory.create_wizard_form(name="", permit_id="")

        result = await submission_service.submit_property(form)

        assert result.success is False
        assert result.property_id is None
        assert result.error.startswith("Please fix the following errors:")
        assert "Property Name is required" in result.error
        assert [error.field for error in result.details.validation_errors] == ["name", "permit_id"]
        assert await property_repository.count() == 0

    @pytest.mark.asyncio
    async def test_unknown_developer(self, submission_service: PropertySubmissionService):
        form = WizardFactory.create_wizard_form(developer_id=999)

        result = await submission_service.submit_property(form)

        assert result.success is False
        assert result.error == "Developer with ID 999 not found. Please select a valid developer."

    @pytest.mark.asyncio
    async def test_duplicate_external_id(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        first = await submission_service.submit_property(WizardFactory.create_wizard_form(external_id="WIZ-DUP"))
        assert first.success is True

        second = await submission_service.submit_property(WizardFactory.create_wizard_form(external_id="WIZ-DUP"))

        assert second.success is False
        assert second.error == (
            'Property with external_id "WIZ-DUP" already exists. Please use a different external ID.'
        )
        assert await property_repository.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_slug_aborts(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository
    ):
        await submission_service.submit_property(WizardFactory.create_wizard_form(slug="creek-vista"))

        result = await submission_service.submit_property(WizardFactory.create_wizard_form(slug="creek-vista"))

        assert result.success is False
        assert result.error.startswith("Failed to create property:")
        assert await property_repository.count() == 1


class TestSubmitPropertyPartialFailures:
    """Failures in the related tables after the property row is stored."""

    @pytest.mark.asyncio
    async def test_failed_facility_link_is_reported(
        self,
        submission_service: PropertySubmissionService,
        monkeypatch
    ):
        original_link = submission_service.facility_repo.link

        async def link(property_id, facility_id, **kwargs):
            facility = await submission_service.facility_repo.get_by_id(facility_id)
            if facility.name == "Gym":
                raise RuntimeError("link table unavailable")
            return await original_link(property_id, facility_id, **kwargs)

        monkeypatch.setattr(submission_service.facility_repo, "link", link)
        form = WizardFactory.create_wizard_form(
            facilities=[{"facility_name": "Pool"}, {"facility_name": "Gym"}, {"facility_name": "Spa"}]
        )

        result = await submission_service.submit_property(form)

        assert result.success is True
        assert result.details.has_partial_failures
        facilities = next(section for section in result.details.sections if section.section == "facilities")
        assert facilities.inserted == 2
        assert facilities.failed == 1
        assert facilities.errors == ['Failed to link facility "Gym": link table unavailable']

        payment_plans = next(section for section in result.details.sections if section.section == "payment_plans")
        assert payment_plans.inserted == 1

    @pytest.mark.asyncio
    async def test_failed_map_points_do_not_stop_submission(
        self,
        submission_service: PropertySubmissionService,
        monkeypatch
    ):
        async def add_map_points(property_id, points):
            raise RuntimeError("map points table locked")

        monkeypatch.setattr(submission_service.property_repo, "add_map_points", add_map_points)

        result = await submission_service.submit_property(WizardFactory.create_wizard_form())

        assert result.success is True
        map_points = next(section for section in result.details.sections if section.section == "map_points")
        assert map_points.inserted == 0
        assert map_points.failed == 2
        assert map_points.errors == ["Failed to insert map points: map points table locked"]

    @pytest.mark.asyncio
    async def test_unit_block_failure_keeps_property_row(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository,
        monkeypatch
    ):
        async def add_unit_blocks(property_id, blocks):
            raise RuntimeError("unit blocks constraint")

        monkeypatch.setattr(submission_service.property_repo, "add_unit_blocks", add_unit_blocks)
        form = WizardFactory.create_wizard_form(external_id="WIZ-UB")

        result = await submission_service.submit_property(form)

        assert result.success is False
        assert result.property_id is not None
        assert result.error == "Failed to insert unit blocks: unit blocks constraint"
        assert [section.section for section in result.details.sections] == ["images"]

        stored = await property_repository.get_by_id(result.property_id)
        assert stored is not None
        assert stored.external_id == "WIZ-UB"

    @pytest.mark.asyncio
    async def test_building_failure_stops_remaining_sections(
        self,
        submission_service: PropertySubmissionService,
        property_repository: PropertyRepository,
        monkeypatch
    ):
        async def add_buildings(property_id, buildings):
            raise RuntimeError("buildings constraint")

        monkeypatch.setattr(submission_service.property_repo, "add_buildings", add_buildings)

        result = await submission_service.submit_property(WizardFactory.create_wizard_form())

        assert result.success is False
        assert result.error == "Failed to insert buildings: buildings constraint"
        assert [section.section for section in result.details.sections] == ["images", "unit_blocks"]
        assert await property_repository.count() == 1

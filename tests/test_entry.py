"""
Tests for the bulk property entry pipeline.
"""

import pytest

from propzing.repositories.property import PropertyRepository
from propzing.repositories.developer import DeveloperRepository
from propzing.schemas.entry import PropertyEntryRequest
from propzing.services.entry import PropertyEntryService
from propzing.utils.conversions import generate_hash_id
from tests.conftest import DeveloperFactory


def make_entry(external_id: str = "ENT-001", **overrides) -> PropertyEntryRequest:
    data = {
        "property": {
            "external_id": external_id,
            "name": "Palm Gardens",
            "slug": f"palm-gardens-{external_id.lower()}",
            "area": "Palm Jumeirah",
            "city": "Dubai",
            "country": "UAE",
            "coordinates": "25.1124,55.1390",
            "status": "Completed",
            "min_price": 2500000,
            "price_currency": "AED",
            "cover_url": "https://cdn.emaar.ae/palm-cover.jpg",
            "parking_specs": "2 per villa",
        },
        "unitTypes": [
            {"unit_type": "Villa", "normalized_type": "4BR", "unit_bedrooms": "4", "units_amount": 12},
        ],
        "buildings": [{"building_name": "Cluster A"}, {"building_name": ""}],
        "facilities": [{"facility_name": "Beach"}, {"facility_name": ""}],
        "mapPoints": [{"poi_name": "Atlantis", "distance_km": 2}, {"poi_name": ""}],
        "images": "https://cdn.emaar.ae/p1.jpg\nhttps://cdn.emaar.ae/p2.jpg,https://cdn.emaar.ae/p3.jpg",
        "paymentPlans": [
            {"payment_plan_name": "50/50", "payment_steps": "10%|40%| 50%", "months_after_handover": 24},
        ],
        "developer": {"name": "Nakheel", "email": "info@nakheel.ae"},
    }
    data.update(overrides)
    return PropertyEntryRequest.model_validate(data)


class TestPropertyEntry:
    """Structured entry ingestion."""

    @pytest.mark.asyncio
    async def test_ingest_uses_hash_id(
        self,
        entry_service: PropertyEntryService,
        property_repository: PropertyRepository
    ):
        response = await entry_service.ingest(make_entry("ENT-001"))

        assert response.success is True
        assert response.property_id == generate_hash_id("ENT-001")
        assert response.property_id < 0
        assert response.message == 'Property "Palm Gardens" successfully added!'

        stored = await property_repository.get_by_external_id("ENT-001")
        assert stored.id == response.property_id
        assert stored.parking == "2 per villa"
        assert stored.latitude == pytest.approx(25.1124)

    @pytest.mark.asyncio
    async def test_sections(self, entry_service: PropertyEntryService):
        response = await entry_service.ingest(make_entry())

        inserted = {section.section: section.inserted for section in response.sections}
        assert inserted == {
            "unit_blocks": 1,
            "buildings": 1,
            "facilities": 1,
            "map_points": 1,
            "images": 4,
            "payment_plans": 1,
        }

    @pytest.mark.asyncio
    async def test_related_rows_use_hash_ids(
        self,
        entry_service: PropertyEntryService,
        property_repository: PropertyRepository
    ):
        response = await entry_service.ingest(make_entry("ENT-002"))
        stored = await property_repository.get_with_details(response.property_id)

        assert stored.unit_blocks[0].external_id == str(generate_hash_id("ENT-002-Villa-4"))
        assert stored.buildings[0].external_id == str(generate_hash_id("ENT-002-building-Cluster A"))

        plan = stored.payment_plans[0]
        assert plan.id == generate_hash_id("ENT-002-plan-50/50")
        assert plan.description == "24 months after handover"
        assert [(value.name, value.sequence) for value in plan.values] == [("10%", 1), ("40%", 2), ("50%", 3)]
        assert plan.values[0].id == generate_hash_id(f"{plan.id}-step-0")

    @pytest.mark.asyncio
    async def test_new_developer_created(
        self,
        entry_service: PropertyEntryService,
        developer_repository: DeveloperRepository,
        property_repository: PropertyRepository
    ):
        await entry_service.ingest(make_entry())

        developer = await developer_repository.get_by_name("Nakheel")
        assert developer is not None
        assert developer.email == "info@nakheel.ae"

        stored = await property_repository.get_by_external_id("ENT-001")
        assert stored.developer_id == developer.id

    @pytest.mark.asyncio
    async def test_existing_developer_updated_with_non_empty_fields(
        self,
        entry_service: PropertyEntryService,
        developer_repository: DeveloperRepository
    ):
        developer = await DeveloperFactory.create_developer(
            developer_repository, "Nakheel", phone="+971 4 390 3333", description="Master developer"
        )
        developer_id = developer.id

        await entry_service.ingest(make_entry())

        updated = await developer_repository.get_by_id(developer_id)
        assert updated.email == "info@nakheel.ae"
        assert updated.phone == "+971 4 390 3333"
        assert updated.description == "Master developer"

    @pytest.mark.asyncio
    async def test_existing_developer_without_contact_details_left_alone(
        self,
        entry_service: PropertyEntryService,
        developer_repository: DeveloperRepository
    ):
        developer = await DeveloperFactory.create_developer(developer_repository, "Nakheel")
        developer_id = developer.id

        await entry_service.ingest(make_entry(developer={"name": "Nakheel", "description": "New text"}))

        unchanged = await developer_repository.get_by_id(developer_id)
        assert unchanged.email == "sales@emaar.ae"
        assert unchanged.description is None

    @pytest.mark.asyncio
    async def test_without_developer(
        self,
        entry_service: PropertyEntryService,
        property_repository: PropertyRepository
    ):
        await entry_service.ingest(make_entry(developer={}))

        stored = await property_repository.get_by_external_id("ENT-001")
        assert stored.developer_id is None

    @pytest.mark.asyncio
    async def test_duplicate_external_id(self, entry_service: PropertyEntryService):
        await entry_service.ingest(make_entry("ENT-DUP"))

        response = await entry_service.ingest(make_entry("ENT-DUP"))

        assert response.success is False
        assert response.error == "Property with external_id ENT-DUP already exists"
        assert response.property_id is None

    def test_blank_external_id_rejected(self):
        with pytest.raises(ValueError):
            make_entry("   ")

    @pytest.mark.asyncio
    async def test_duplicate_payment_plan_names_partially_fail(
        self,
        entry_service: PropertyEntryService,
        property_repository: PropertyRepository
    ):
        plan = {"payment_plan_name": "50/50", "payment_steps": "10%|40%| 50%", "months_after_handover": 24}

        response = await entry_service.ingest(make_entry("ENT-PF", paymentPlans=[plan, dict(plan)]))

        assert response.success is True
        assert response.property_id == generate_hash_id("ENT-PF")
        payment_plans = next(section for section in response.sections if section.section == "payment_plans")
        assert payment_plans.inserted == 1
        assert payment_plans.failed == 1
        assert payment_plans.errors[0].startswith('Failed to insert payment plan "50/50":')

        stored = await property_repository.get_with_details(response.property_id)
        assert [stored_plan.name for stored_plan in stored.payment_plans] == ["50/50"]

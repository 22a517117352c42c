"""
Tests for the payload builder and the property form checks.
"""

import pytest

from propzing.schemas.property_form import (
    PropertyFormData,
    DeveloperFormData,
    ImageInput,
    UnitBlockFormData,
    BuildingFormData,
    PaymentPlanFormData,
    FacilityFormData,
    MapPointFormData,
)
from propzing.services.payload import build_property_payload, validate_property_form
from propzing.services.property import PropertyService


def make_form(**overrides) -> PropertyFormData:
    data = {
        "external_id": "PRJ-100",
        "slug": "bay-residences",
        "name": "Bay Residences",
        "area": "Business Bay",
        "city": "Dubai",
        "country": "UAE",
        "min_price_aed": 900000,
        "max_price_aed": 2500000,
        "price_currency": "AED",
        "coordinates_text": "25.18, 55.27",
        "developer": DeveloperFormData(name="Damac"),
        "cover_image": ImageInput(url="https://cdn.emaar.ae/cover.jpg"),
        "unit_blocks": [
            UnitBlockFormData(
                unit_type="Apartments",
                normalized_type="1BR",
                units_amount=20,
                area_unit="sqft",
                units_area_from=750,
                units_area_to=900,
                price_currency="AED",
                units_price_from=900000,
                units_price_to=1200000,
            )
        ],
        "payment_plans": [PaymentPlanFormData(plan_name="60/40", payment_steps="60% construction, 40% handover")],
        "facilities": [FacilityFormData(name="Gym")],
        "map_points": [MapPointFormData(name="Dubai Mall", distance_km=3.2)],
    }
    data.update(overrides)
    return PropertyFormData(**data)


class TestBuildPropertyPayload:
    """Payload construction from the structured form."""

    def test_scalar_fields_are_copied(self):
        payload = build_property_payload(make_form())

        assert payload.external_id == "PRJ-100"
        assert payload.name == "Bay Residences"
        assert payload.developer == "Damac"
        assert payload.developer_data.name == "Damac"
        assert payload.cover.url == "https://cdn.emaar.ae/cover.jpg"

    def test_empty_scalars_become_none(self):
        payload = build_property_payload(make_form(area="", furnishing="", permit_id=""))

        assert payload.area is None
        assert payload.furnishing is None
        assert payload.permit_id is None

    def test_prices_fall_back_to_aed_values(self):
        payload = build_property_payload(make_form())
        assert payload.min_price == 900000
        assert payload.max_price == 2500000

    def test_explicit_prices_win_over_aed(self):
        payload = build_property_payload(make_form(min_price=250000, max_price=600000, price_currency="USD"))
        assert payload.min_price == 250000
        assert payload.max_price == 600000

    def test_unit_block_gets_m2_from_sqft(self):
        payload = build_property_payload(make_form())
        block = payload.unit_blocks[0]

        assert block.units_area_from == 750
        assert block.units_area_from_m2 == pytest.approx(750 / 10.7639)
        assert block.units_area_to_m2 == pytest.approx(900 / 10.7639)

    def test_unit_block_gets_sqft_from_m2(self):
        form = make_form(unit_blocks=[
            UnitBlockFormData(
                unit_type="Villas",
                normalized_type="4BR",
                area_unit="m2",
                units_area_from_m2=300,
                units_area_to_m2=400,
            )
        ])
        block = build_property_payload(form).unit_blocks[0]

        assert block.units_area_from == pytest.approx(300 * 10.7639)
        assert block.units_area_to == pytest.approx(400 * 10.7639)

    def test_unit_block_aed_prices(self):
        form = make_form(unit_blocks=[
            UnitBlockFormData(
                unit_type="Apartments",
                normalized_type="2BR",
                price_currency="USD",
                units_price_from=100000,
                units_price_to=200000,
            )
        ])
        block = build_property_payload(form).unit_blocks[0]

        assert block.units_price_from_aed == 367000.0
        assert block.units_price_to_aed == 734000.0

    def test_unit_block_keeps_existing_aed_prices(self):
        form = make_form(unit_blocks=[
            UnitBlockFormData(
                unit_type="Apartments",
                normalized_type="2BR",
                price_currency="USD",
                units_price_from=100000,
                units_price_from_aed=370000,
            )
        ])
        block = build_property_payload(form).unit_blocks[0]
        assert block.units_price_from_aed == 370000

    def test_empty_collections_are_omitted(self):
        payload = build_property_payload(
            make_form(unit_blocks=[], payment_plans=[], facilities=[], map_points=[])
        )

        assert payload.unit_blocks is None
        assert payload.payment_plans is None
        assert payload.facilities is None
        assert payload.map_points is None
        assert payload.buildings is None
        assert payload.lobby is None

    def test_facility_image_url_from_image(self):
        form = make_form(facilities=[
            FacilityFormData(name="Pool", image=ImageInput(url="https://cdn.emaar.ae/pool.jpg"))
        ])
        facility = build_property_payload(form).facilities[0]
        assert facility.image_url == "https://cdn.emaar.ae/pool.jpg"

    def test_buildings_are_mapped(self):
        form = make_form(buildings=[BuildingFormData(name="Tower B", completion_date="2027-06-30")])
        building = build_property_payload(form).buildings[0]

        assert building.name == "Tower B"
        assert building.completion_date == "2027-06-30"
        assert building.external_id is None


class TestValidatePropertyForm:
    """Errors and warnings reported for the structured form."""

    def test_complete_form_has_no_errors(self):
        issues = validate_property_form(make_form())
        assert [issue for issue in issues if issue.severity == "error"] == []

    def test_missing_required_fields(self):
        form = make_form(slug="", name="  ", city="", country="", unit_blocks=[])
        messages = {issue.path: issue.message for issue in validate_property_form(form) if issue.severity == "error"}

        assert messages == {
            "slug": "Slug is required",
            "name": "Property name is required",
            "city": "City is required",
            "country": "Country is required",
            "unit_blocks": "At least one unit block is required",
        }

    def test_recommendations_are_warnings(self):
        form = make_form(cover_image=None, payment_plans=[], facilities=[], map_points=[], coordinates_text=None)
        warnings = {issue.path for issue in validate_property_form(form) if issue.severity == "warning"}

        assert {"cover_image.url", "payment_plans", "facilities", "map_points", "coordinates_text"} <= warnings

    def test_unit_block_warnings(self):
        form = make_form(unit_blocks=[UnitBlockFormData(unit_type="Apartments", normalized_type="1BR")])
        warnings = {issue.path: issue.message for issue in validate_property_form(form) if issue.severity == "warning"}

        assert warnings["unit_blocks[0].units_amount"] == "units_amount is missing"
        assert warnings["unit_blocks[0].units_area_from_m2"] == "Units area in m2 is partially missing"
        assert warnings["unit_blocks[0].units_price_from"] == "Units price range is partially missing"
        assert warnings["unit_blocks[0].units_price_from_aed"] == (
            "Units price range in AED is missing and cannot be derived from currency conversion"
        )

    def test_missing_aed_price_range(self):
        form = make_form(min_price_aed=None)
        paths = [issue.path for issue in validate_property_form(form)]
        assert "min_price_aed" in paths


class TestPreviewPayload:

    def test_preview_is_invalid_when_errors_exist(self, property_service: PropertyService):
        preview = property_service.preview_payload(make_form(slug=""))
        assert preview.valid is False
        assert preview.payload.slug is None

    def test_preview_valid_with_only_warnings(self, property_service: PropertyService):
        preview = property_service.preview_payload(make_form(facilities=[]))
        assert preview.valid is True
        assert any(issue.path == "facilities" for issue in preview.issues)

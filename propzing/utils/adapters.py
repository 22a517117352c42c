"""
Adapters between the wizard form shape and the structured property form.
"""

import time
from typing import Optional

from propzing.schemas.property_form import (
    PropertyFormData,
    ImageInput,
    DeveloperFormData,
    BuildingFormData,
    UnitBlockFormData,
    PaymentPlanFormData,
    FacilityFormData,
    MapPointFormData,
)
from propzing.schemas.wizard import (
    WizardFormData,
    UnitType,
    Building,
    Facility,
    MapPoint,
    PaymentPlan,
)
from propzing.utils.conversions import price_to_aed


def _or_none(value):
    """Falsy values (empty strings, zero) become None."""
    return value or None


def _generated_id() -> str:
    return str(int(time.time() * 1000))


def convert_to_property_form_data(wizard: WizardFormData) -> PropertyFormData:
    """
    Map wizard state onto the structured form.

    Property prices are converted to AED from the wizard currency; unit blocks
    inherit the form-wide area unit and currency.
    """
    cover_image = ImageInput(url=wizard.cover_url) if wizard.cover_url else None

    # Populated from developer_id by the dashboard when needed
    developer = DeveloperFormData(name="")

    buildings = [
        BuildingFormData(
            external_id=_or_none(building.id),
            name=building.building_name or "",
            description=_or_none(building.building_description),
            completion_date=_or_none(building.building_completion_date),
            image_url=_or_none(building.building_image_url),
        )
        for building in wizard.buildings
    ]

    unit_blocks = [
        UnitBlockFormData(
            id=_or_none(unit.id),
            unit_type=unit.unit_type or "",
            normalized_type=unit.normalized_type or "",
            unit_bedrooms=_or_none(unit.unit_bedrooms),
            units_amount=_or_none(unit.units_amount),
            units_area_from_m2=_or_none(unit.units_area_from_m2),
            units_area_to_m2=_or_none(unit.units_area_to_m2),
            units_price_from=_or_none(unit.units_price_from),
            units_price_to=_or_none(unit.units_price_to),
            typical_unit_image_url=_or_none(unit.typical_unit_image_url),
            area_unit=_or_none(wizard.area_unit),
            price_currency=_or_none(wizard.price_currency),
        )
        for unit in wizard.unit_types
    ]

    payment_plans = [
        PaymentPlanFormData(
            plan_name=plan.payment_plan_name or "",
            months_after_handover=_or_none(plan.months_after_handover),
            payment_steps=_or_none(plan.payment_steps),
        )
        for plan in wizard.payment_plans
    ]

    facilities = [
        FacilityFormData(
            name=facility.facility_name or "",
            image_url=_or_none(facility.facility_image_url),
            image_source=_or_none(facility.facility_image_source),
            image=ImageInput(url=facility.facility_image_url) if facility.facility_image_url else None,
        )
        for facility in wizard.facilities
    ]

    map_points = [
        MapPointFormData(name=point.poi_name or "", distance_km=_or_none(point.distance_km))
        for point in wizard.map_points
    ]

    return PropertyFormData(
        external_id=_or_none(wizard.external_id),
        slug=wizard.slug or "",
        name=wizard.name or "",
        area=_or_none(wizard.area),
        city=wizard.city or "",
        country=wizard.country or "",
        status=_or_none(wizard.status),
        readiness=_or_none(wizard.readiness),
        sale_status=_or_none(wizard.sale_status),
        completion_datetime=_or_none(wizard.completion_datetime),
        min_price_aed=price_to_aed(wizard.min_price, wizard.price_currency),
        max_price_aed=price_to_aed(wizard.max_price, wizard.price_currency),
        price_currency=_or_none(wizard.price_currency),
        min_area=_or_none(wizard.min_area),
        max_area=_or_none(wizard.max_area),
        area_unit=_or_none(wizard.area_unit),
        furnishing=_or_none(wizard.furnishing),
        service_charge=_or_none(wizard.service_charge),
        parking=wizard.parking_specs,
        has_escrow=wizard.has_escrow or False,
        post_handover=wizard.post_handover or False,
        is_partner_project=False,
        coordinates_text=_or_none(wizard.coordinates),
        overview=_or_none(wizard.overview),
        website=_or_none(wizard.website),
        video_url=_or_none(wizard.video_url),
        brochure_url=_or_none(wizard.brochure_url),
        layouts_pdf=_or_none(wizard.layouts_pdf),
        permit_id=_or_none(wizard.permit_id),
        cover_image=cover_image,
        developer=developer,
        developer_id=_or_none(wizard.developer_id),
        buildings=buildings,
        unit_blocks=unit_blocks,
        payment_plans=payment_plans,
        facilities=facilities,
        map_points=map_points,
        cover_url=_or_none(wizard.cover_url),
        image_urls=_or_none(wizard.image_urls),
    )


def _rebuild_image_urls(form: PropertyFormData) -> str:
    images = (
        list(form.lobby_images)
        + list(form.interior_images)
        + list(form.architecture_images)
        + list(form.master_plan_images)
    )
    return ",".join(image.url for image in images if image.url)


def _facility_image_url(facility: FacilityFormData) -> Optional[str]:
    return facility.image_url or (facility.image.url if facility.image else None)


def convert_to_wizard_form_data(form: PropertyFormData) -> WizardFormData:
    """
    Map the structured form back onto the wizard shape.

    Rows without an id get a timestamp id; image_urls is rebuilt from the
    categorized image lists when the legacy value is absent.
    """
    return WizardFormData(
        external_id=form.external_id or "",
        name=form.name or "",
        slug=form.slug or "",
        developer=form.developer.name if form.developer else "",
        developer_id=_or_none(form.developer_id),
        area=form.area or "",
        city=form.city or "",
        country=form.country or "",
        coordinates=form.coordinates_text or "",
        website=form.website or "",
        status=form.status or "",
        sale_status=form.sale_status or "",
        completion_datetime=form.completion_datetime or "",
        readiness=_or_none(form.readiness),
        permit_id=form.permit_id or "",
        # The form keeps AED values, which the wizard shows as its prices
        min_price=_or_none(form.min_price_aed),
        max_price=_or_none(form.max_price_aed),
        price_currency=form.price_currency or "AED",
        service_charge=form.service_charge or "",
        min_area=_or_none(form.min_area),
        max_area=_or_none(form.max_area),
        area_unit=form.area_unit or "sqft",
        furnishing=form.furnishing or "",
        has_escrow=form.has_escrow or False,
        post_handover=form.post_handover or False,
        unit_types=[
            UnitType(
                id=block.id or _generated_id(),
                unit_type=block.unit_type,
                normalized_type=block.normalized_type,
                unit_bedrooms=block.unit_bedrooms or "",
                units_amount=_or_none(block.units_amount),
                units_area_from_m2=_or_none(block.units_area_from_m2),
                units_area_to_m2=_or_none(block.units_area_to_m2),
                units_price_from=_or_none(block.units_price_from),
                units_price_to=_or_none(block.units_price_to),
                typical_unit_image_url=block.typical_unit_image_url or "",
            )
            for block in form.unit_blocks
        ],
        buildings=[
            Building(
                id=building.external_id or _generated_id(),
                building_name=building.name,
                building_description=building.description or "",
                building_completion_date=building.completion_date or "",
                building_image_url=building.image_url or "",
            )
            for building in form.buildings
        ],
        facilities=[
            Facility(
                id=_generated_id(),
                facility_name=facility.name,
                facility_image_url=_facility_image_url(facility) or "",
                facility_image_source=facility.image_source or "",
            )
            for facility in form.facilities
        ],
        map_points=[
            MapPoint(id=_generated_id(), poi_name=point.name, distance_km=_or_none(point.distance_km))
            for point in form.map_points
        ],
        cover_url=(form.cover_image.url if form.cover_image else None) or form.cover_url or "",
        image_urls=form.image_urls or _rebuild_image_urls(form),
        video_url=form.video_url or "",
        brochure_url=form.brochure_url or "",
        layouts_pdf=form.layouts_pdf or "",
        payment_plans=[
            PaymentPlan(
                id=_generated_id(),
                payment_plan_name=plan.plan_name,
                payment_steps=plan.payment_steps or "",
                months_after_handover=_or_none(plan.months_after_handover),
            )
            for plan in form.payment_plans
        ],
        parking_specs=form.parking if form.parking is not None else "",
        overview=form.overview or "",
    )

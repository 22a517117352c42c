"""
Builds the storage payload from the structured property form and checks the form for issues.
The payload builder is the single place that decides what gets stored.
"""

from typing import List, Optional
from propzing.schemas.property_form import (
    PropertyFormData,
    PropertyPayload,
    DeveloperPayload,
    BuildingPayload,
    UnitBlockPayload,
    UnitBlockFormData,
    PaymentPlanPayload,
    FacilityPayload,
    MapPointPayload,
    ValidationIssue,
)
from propzing.utils.conversions import convert_to_aed, m2_to_sqft, sqft_to_m2
from propzing.config import settings
import logging

logger = logging.getLogger(__name__)


def _or_none(value):
    """Falsy values (empty strings, zero, empty lists) become None."""
    return value or None


def _first_set(*values):
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _block_aed(amount: Optional[float], existing: Optional[float], currency: Optional[str]) -> Optional[float]:
    if existing or amount is None:
        return existing
    if currency == settings.base_currency:
        return amount
    return convert_to_aed(amount, currency)


def _build_unit_block(block: UnitBlockFormData) -> UnitBlockPayload:
    area_from, area_to = block.units_area_from, block.units_area_to
    area_from_m2, area_to_m2 = block.units_area_from_m2, block.units_area_to_m2

    # Fill in whichever side of sqft/m2 is missing
    if block.area_unit in ("sqft", "sqm"):
        if area_from is not None and not area_from_m2:
            area_from_m2 = sqft_to_m2(area_from)
        if area_to is not None and not area_to_m2:
            area_to_m2 = sqft_to_m2(area_to)
    elif block.area_unit == "m2":
        if area_from_m2 is not None and not area_from:
            area_from = m2_to_sqft(area_from_m2)
        if area_to_m2 is not None and not area_to:
            area_to = m2_to_sqft(area_to_m2)

    return UnitBlockPayload(
        normalized_type=block.normalized_type,
        unit_bedrooms=_or_none(block.unit_bedrooms),
        units_amount=_or_none(block.units_amount),
        typical_unit_image_url=_or_none(block.typical_unit_image_url),
        unit_type=block.unit_type,
        price_currency=_or_none(block.price_currency),
        units_area_from_m2=area_from_m2,
        units_area_to_m2=area_to_m2,
        area_unit=_or_none(block.area_unit),
        units_area_from=area_from,
        units_area_to=area_to,
        units_price_from=_or_none(block.units_price_from),
        units_price_to=_or_none(block.units_price_to),
        units_price_from_aed=_block_aed(block.units_price_from, block.units_price_from_aed, block.price_currency),
        units_price_to_aed=_block_aed(block.units_price_to, block.units_price_to_aed, block.price_currency),
    )


def build_property_payload(form: PropertyFormData) -> PropertyPayload:
    """
    Build the payload sent for storage from the property form.

    Empty scalars become None, prices fall back to their AED values, unit blocks get
    both area units and AED prices where they can be derived, and empty child
    collections are omitted.
    """
    developer = form.developer
    payload = PropertyPayload(
        external_id=_or_none(form.external_id),
        slug=_or_none(form.slug),
        name=_or_none(form.name),
        area=_or_none(form.area),
        city=_or_none(form.city),
        country=_or_none(form.country),
        developer=_or_none(developer.name) if developer else None,
        developer_data=DeveloperPayload(
            name=developer.name,
            description=_or_none(developer.description),
            email=_or_none(developer.email),
            website=_or_none(developer.website),
            office_address=_or_none(developer.office_address),
            logo=developer.logo,
            working_hours=_or_none(developer.working_hours),
        ) if developer else None,
        status=_or_none(form.status),
        readiness=_or_none(form.readiness),
        sale_status=_or_none(form.sale_status),
        completion_datetime=_or_none(form.completion_datetime),
        min_price=_first_set(form.min_price, form.min_price_aed),
        max_price=_first_set(form.max_price, form.max_price_aed),
        price_currency=_or_none(form.price_currency),
        min_area=_or_none(form.min_area),
        max_area=_or_none(form.max_area),
        area_unit=_or_none(form.area_unit),
        furnishing=_or_none(form.furnishing),
        service_charge=_or_none(form.service_charge),
        parking=_or_none(form.parking),
        has_escrow=bool(form.has_escrow),
        post_handover=bool(form.post_handover),
        is_partner_project=bool(form.is_partner_project),
        coordinates_text=_or_none(form.coordinates_text),
        overview=_or_none(form.overview),
        website=_or_none(form.website),
        video_url=_or_none(form.video_url),
        brochure_url=_or_none(form.brochure_url),
        layouts_pdf=_or_none(form.layouts_pdf),
        permit_id=_or_none(form.permit_id),
        cover=form.cover_image,
        lobby=_or_none(form.lobby_images),
        interior=_or_none(form.interior_images),
        architecture=_or_none(form.architecture_images),
        master_plan=_or_none(form.master_plan_images),
    )

    if form.buildings:
        payload.buildings = [
            BuildingPayload(
                external_id=_or_none(building.external_id),
                name=building.name,
                description=_or_none(building.description),
                completion_date=_or_none(building.completion_date),
                image_url=_or_none(building.image_url),
            )
            for building in form.buildings
        ]

    if form.unit_blocks:
        payload.unit_blocks = [_build_unit_block(block) for block in form.unit_blocks]

    if form.payment_plans:
        payload.payment_plans = [
            PaymentPlanPayload(
                plan_name=plan.plan_name,
                months_after_handover=_or_none(plan.months_after_handover),
                payments_raw=_or_none(plan.payments_raw),
                payment_steps=_or_none(plan.payment_steps),
            )
            for plan in form.payment_plans
        ]

    if form.facilities:
        payload.facilities = [
            FacilityPayload(
                name=facility.name,
                image=facility.image,
                image_source=_or_none(facility.image_source),
                image_url=facility.image_url or (facility.image.url if facility.image else None) or None,
            )
            for facility in form.facilities
        ]

    if form.map_points:
        payload.map_points = [
            MapPointPayload(name=point.name, distance_km=_or_none(point.distance_km))
            for point in form.map_points
        ]

    logger.debug(f"Built payload for property {payload.external_id or payload.name}")
    return payload


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_property_form(form: PropertyFormData) -> List[ValidationIssue]:
    """
    Check the property form.

    Errors mark missing required fields; warnings flag data that is recommended
    but does not block storage.
    """
    issues: List[ValidationIssue] = []

    def error(path: str, message: str):
        issues.append(ValidationIssue(path=path, severity="error", message=message))

    def warning(path: str, message: str):
        issues.append(ValidationIssue(path=path, severity="warning", message=message))

    if _blank(form.slug):
        error("slug", "Slug is required")
    if _blank(form.name):
        error("name", "Property name is required")
    if _blank(form.city):
        error("city", "City is required")
    if _blank(form.country):
        error("country", "Country is required")
    if not form.unit_blocks:
        error("unit_blocks", "At least one unit block is required")

    if not (form.cover_image and form.cover_image.url):
        warning("cover_image.url", "Cover image is recommended")
    if not form.payment_plans:
        warning("payment_plans", "No payment plans added")
    if not form.facilities:
        warning("facilities", "No facilities added")
    if not form.map_points:
        warning("map_points", "No map points / points of interest added")

    for idx, block in enumerate(form.unit_blocks):
        prefix = f"unit_blocks[{idx}]"
        if not block.units_amount:
            warning(f"{prefix}.units_amount", "units_amount is missing")
        if not block.units_area_from_m2 or not block.units_area_to_m2:
            warning(f"{prefix}.units_area_from_m2", "Units area in m2 is partially missing")
        if not block.units_price_from or not block.units_price_to:
            warning(f"{prefix}.units_price_from", "Units price range is partially missing")

        can_derive_aed = bool(block.price_currency) and (
            block.units_price_from is not None and block.units_price_to is not None
        )
        has_aed_values = block.units_price_from_aed is not None and block.units_price_to_aed is not None
        if not has_aed_values and not can_derive_aed:
            warning(
                f"{prefix}.units_price_from_aed",
                "Units price range in AED is missing and cannot be derived from currency conversion"
            )

    if not form.min_price_aed or not form.max_price_aed:
        warning("min_price_aed", "Property price range in AED is missing")
    if not form.coordinates_text:
        warning("coordinates_text", "Coordinates or location text is missing")

    return issues

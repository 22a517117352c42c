"""
Pydantic schemas for the 9-step property entry wizard.
Field names follow the wizard form; list fields accept their camelCase names.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


def _coerce_id(v):
    """Client-generated ids arrive as strings or timestamps."""
    if v is None:
        return ""
    if isinstance(v, (int, float)):
        return str(int(v))
    return v


class WizardItem(BaseModel):
    """Base for repeatable wizard rows."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field("", description="Client-side row identifier")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _coerce_id(v)


class UnitType(WizardItem):
    """Step 5 unit type row."""

    unit_type: Optional[str] = Field("", description="Unit type, e.g. Apartment", examples=["Apartment"])
    normalized_type: Optional[str] = Field("", description="Normalized type, e.g. 1BR", examples=["1BR"])
    unit_bedrooms: Optional[str] = Field("", description="Bedrooms label", examples=["1"])
    units_amount: Optional[int] = None
    units_area_from_m2: Optional[float] = None
    units_area_to_m2: Optional[float] = None
    units_price_from: Optional[float] = None
    units_price_to: Optional[float] = None
    typical_unit_image_url: Optional[str] = ""


class Building(WizardItem):
    """Step 6 building row."""

    building_name: Optional[str] = ""
    building_description: Optional[str] = ""
    building_completion_date: Optional[str] = ""
    building_image_url: Optional[str] = ""


class Facility(WizardItem):
    """Step 6 facility row."""

    facility_name: Optional[str] = ""
    facility_image_url: Optional[str] = ""
    facility_image_source: Optional[str] = ""


class MapPoint(WizardItem):
    """Step 6 point of interest row."""

    poi_name: Optional[str] = ""
    distance_km: Optional[float] = None


class PaymentPlan(WizardItem):
    """Step 8 payment plan row; payment_steps is a comma-separated list."""

    payment_plan_name: Optional[str] = ""
    payment_steps: Optional[str] = Field("", examples=["20% on booking, 40% during construction, 40% on handover"])
    months_after_handover: Optional[int] = None


class WizardFormData(BaseModel):
    """Complete wizard state as submitted by the data-entry UI."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Step 1: Basic information
    external_id: Optional[str] = Field("", description="Project identifier from the data entry", examples=["PRJ-001"])
    name: Optional[str] = Field("", description="Property name", examples=["Marina Heights"])
    slug: Optional[str] = Field("", description="URL slug", examples=["marina-heights"])
    developer: Optional[str] = Field("", description="Developer name")
    developer_id: Optional[int] = Field(None, description="Selected partner developer ID")

    # Step 2: Location & contact
    area: Optional[str] = ""
    city: Optional[str] = ""
    country: Optional[str] = ""
    coordinates: Optional[str] = Field("", description="Coordinates as 'lat,lng'", examples=["25.0800,55.1400"])
    website: Optional[str] = ""

    # Step 3: Status & timeline
    status: Optional[str] = ""
    sale_status: Optional[str] = ""
    completion_datetime: Optional[str] = ""
    readiness: Optional[float] = None
    permit_id: Optional[str] = Field("", description="RERA number / permit ID")

    # Step 4: Pricing & terms
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    price_currency: Optional[str] = "AED"
    service_charge: Optional[str] = ""
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    area_unit: Optional[str] = "sqft"
    furnishing: Optional[str] = ""
    has_escrow: bool = False
    post_handover: bool = False

    # Step 5: Unit types
    unit_types: List[UnitType] = Field(default_factory=list, alias="unitTypes")

    # Step 6: Amenities & features
    buildings: List[Building] = Field(default_factory=list)
    facilities: List[Facility] = Field(default_factory=list)
    map_points: List[MapPoint] = Field(default_factory=list, alias="mapPoints")

    # Step 7: Media & documents
    cover_url: Optional[str] = ""
    image_urls: Optional[str] = Field("", description="Comma-separated additional image URLs")
    video_url: Optional[str] = ""
    brochure_url: Optional[str] = ""
    layouts_pdf: Optional[str] = ""

    # Step 8: Payment plans & parking
    payment_plans: List[PaymentPlan] = Field(default_factory=list, alias="paymentPlans")
    parking_specs: Optional[str] = ""

    # Step 9: Developer & description
    overview: Optional[str] = ""
    developer_email: Optional[str] = ""
    developer_phone: Optional[str] = ""
    developer_office: Optional[str] = ""
    developer_description: Optional[str] = ""
    developer_website: Optional[str] = ""
    developer_logo_url: Optional[str] = ""
    developer_working_hours: Optional[str] = ""

    @field_validator("unit_types", "buildings", "facilities", "map_points", "payment_plans", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return v if v is not None else []


class WizardValidationError(BaseModel):
    """A single wizard field error, tagged with the step that owns the field."""

    field: str = Field(..., examples=["unitTypes[0].unit_type"])
    message: str = Field(..., examples=["Unit Type is required for unit 1"])
    step: Optional[int] = Field(None, ge=0, le=9)


class WizardValidationResponse(BaseModel):
    """Result of validating a wizard submission without storing it."""

    valid: bool
    errors: List[WizardValidationError] = Field(default_factory=list)
    message: str = Field("", description="Errors grouped by step, ready for display")

"""
Pydantic schemas for property responses, dashboard listing and updates.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from propzing.schemas.developer import DeveloperResponse


class ChangelogEntry(BaseModel):
    """One field change recorded on a property."""

    date_and_time: str = Field(..., examples=["2025-01-31T10:15:00Z"])
    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    metadata: str = ""


class PropertyResponse(BaseModel):
    """Property columns as returned to the dashboard."""

    id: int
    external_id: str
    name: str
    slug: Optional[str] = None
    developer_id: Optional[int] = None
    developer: Optional[str] = Field(None, description="Developer name")
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    coordinates_text: Optional[str] = None
    website: Optional[str] = None
    status: Optional[str] = None
    sale_status: Optional[str] = None
    completion_datetime: Optional[str] = None
    readiness: Optional[float] = None
    permit_id: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_price_aed: Optional[float] = None
    max_price_aed: Optional[float] = None
    price_currency: Optional[str] = None
    service_charge: Optional[str] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    area_unit: Optional[str] = None
    furnishing: Optional[str] = None
    has_escrow: bool = False
    post_handover: bool = False
    is_partner_project: bool = False
    cover_url: Optional[str] = None
    video_url: Optional[str] = None
    brochure_url: Optional[str] = None
    layouts_pdf: Optional[str] = None
    parking: Optional[str] = None
    overview: Optional[str] = None
    changelog: List[ChangelogEntry] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PropertyImageResponse(BaseModel):
    id: int
    property_id: int
    image_url: str
    category: Optional[str] = None


class UnitBlockResponse(BaseModel):
    id: int
    property_id: int
    source_id: Optional[int] = None
    external_id: Optional[str] = None
    unit_type: str
    normalized_type: Optional[str] = None
    unit_bedrooms: Optional[str] = None
    units_amount: Optional[int] = None
    units_area_from_m2: Optional[float] = None
    units_area_to_m2: Optional[float] = None
    units_price_from: Optional[float] = None
    units_price_to: Optional[float] = None
    price_currency: Optional[str] = None
    units_price_from_aed: Optional[float] = None
    units_price_to_aed: Optional[float] = None
    typical_unit_image_url: Optional[str] = None


class BuildingResponse(BaseModel):
    id: int
    property_id: int
    external_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    completion_date: Optional[str] = None
    image_url: Optional[str] = None


class PropertyFacilityLink(BaseModel):
    id: int
    property_id: int
    facility_id: int
    image_url: Optional[str] = None
    image_source: Optional[str] = None


class FacilityResponse(BaseModel):
    """Facility with the property-specific link row nested."""

    id: int
    name: Optional[str] = None
    property_facility: PropertyFacilityLink


class MapPointResponse(BaseModel):
    id: int
    property_id: int
    source_id: Optional[int] = None
    name: str
    distance_km: Optional[float] = None
    sequence: Optional[int] = None


class PaymentPlanValueResponse(BaseModel):
    id: int
    property_payment_plan_id: int
    name: str
    value_raw: str
    sequence: int


class PaymentPlanResponse(BaseModel):
    id: int
    property_id: int
    name: str
    description: Optional[str] = None
    values: List[PaymentPlanValueResponse] = Field(default_factory=list)


class PropertyDetailsResponse(BaseModel):
    """Property with every related row, as shown on the details page."""

    property: PropertyResponse
    developer: Optional[DeveloperResponse] = None
    images: List[PropertyImageResponse] = Field(default_factory=list)
    unit_blocks: List[UnitBlockResponse] = Field(default_factory=list)
    buildings: List[BuildingResponse] = Field(default_factory=list)
    facilities: List[FacilityResponse] = Field(default_factory=list)
    map_points: List[MapPointResponse] = Field(default_factory=list)
    payment_plans: List[PaymentPlanResponse] = Field(default_factory=list)


class PropertyListItem(BaseModel):
    """Row of the dashboard properties table."""

    id: int
    external_id: str
    name: str
    slug: Optional[str] = None
    developer: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    price_currency: Optional[str] = None
    cover_url: Optional[str] = None
    created_at: Optional[str] = None


class PropertyListResponse(BaseModel):
    properties: List[PropertyListItem]
    total: int = Field(..., description="Total number of matching properties")
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class PropertyFilterOptions(BaseModel):
    """Distinct values available to the dashboard filters."""

    areas: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)
    developers: List[str] = Field(default_factory=list)


class PropertyUpdate(BaseModel):
    """
    Partial property update from the dashboard.
    Only fields present in the request are applied and logged in the changelog.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    developer_id: Optional[int] = None
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    coordinates_text: Optional[str] = None
    website: Optional[str] = None
    status: Optional[str] = None
    sale_status: Optional[str] = None
    completion_datetime: Optional[str] = None
    readiness: Optional[float] = Field(None, ge=0, le=100)
    permit_id: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    min_price_aed: Optional[float] = Field(None, ge=0)
    max_price_aed: Optional[float] = Field(None, ge=0)
    price_currency: Optional[str] = Field(None, max_length=10)
    service_charge: Optional[str] = None
    min_area: Optional[float] = Field(None, ge=0)
    max_area: Optional[float] = Field(None, ge=0)
    area_unit: Optional[str] = Field(None, max_length=10)
    furnishing: Optional[str] = None
    has_escrow: Optional[bool] = None
    post_handover: Optional[bool] = None
    is_partner_project: Optional[bool] = None
    cover_url: Optional[str] = None
    video_url: Optional[str] = None
    brochure_url: Optional[str] = None
    layouts_pdf: Optional[str] = None
    parking: Optional[str] = None
    overview: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if v is not None and not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip() if v else v


class PropertyDeleteResponse(BaseModel):
    success: bool = True
    message: str

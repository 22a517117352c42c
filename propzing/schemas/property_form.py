"""
Pydantic schemas for the structured property form and the storage payload built from it.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional


class ImageInput(BaseModel):
    """Uploaded media reference."""

    url: str = Field(..., description="Public URL of the uploaded file")
    name: Optional[str] = None
    path: Optional[str] = None
    mime: Optional[str] = None
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    image_source: Optional[str] = None


class DeveloperFormData(BaseModel):
    name: str = ""
    description: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    office_address: Optional[str] = None
    logo: Optional[ImageInput] = None
    working_hours: Optional[str] = None


class BuildingFormData(BaseModel):
    external_id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    completion_date: Optional[str] = Field(None, description="ISO date string")
    image_url: Optional[str] = None


class UnitBlockFormData(BaseModel):
    """Unit block as edited in the form; areas may be given in sqft or m2."""

    id: Optional[str] = None
    unit_type: str = Field("", examples=["Apartments"])
    normalized_type: str = Field("", examples=["1BR"])
    unit_bedrooms: Optional[str] = None
    bedrooms_amount: Optional[int] = None
    units_amount: Optional[int] = None
    area_unit: Optional[str] = Field(None, description="'sqft', 'sqm' or 'm2'")
    units_area_from: Optional[float] = Field(None, description="Area from, in sqft")
    units_area_to: Optional[float] = Field(None, description="Area to, in sqft")
    units_area_from_m2: Optional[float] = None
    units_area_to_m2: Optional[float] = None
    price_currency: Optional[str] = None
    units_price_from: Optional[float] = None
    units_price_to: Optional[float] = None
    units_price_from_aed: Optional[float] = None
    units_price_to_aed: Optional[float] = None
    typical_unit_image_url: Optional[str] = None


class PaymentPlanFormData(BaseModel):
    plan_name: str = ""
    months_after_handover: Optional[int] = None
    payments_raw: Optional[Any] = None
    payment_steps: Optional[str] = None


class FacilityFormData(BaseModel):
    name: str = ""
    image: Optional[ImageInput] = None
    image_source: Optional[str] = None
    image_url: Optional[str] = None


class MapPointFormData(BaseModel):
    name: str = ""
    distance_km: Optional[float] = None


class PropertyFormData(BaseModel):
    """Structured property form."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    external_id: Optional[str] = None
    slug: str = ""
    name: str = ""
    area: Optional[str] = None
    city: str = ""
    country: str = ""
    status: Optional[str] = None
    readiness: Optional[float] = None
    sale_status: Optional[str] = None
    completion_datetime: Optional[str] = None
    min_price: Optional[float] = Field(None, description="Face value in price_currency")
    max_price: Optional[float] = Field(None, description="Face value in price_currency")
    min_price_aed: Optional[float] = None
    max_price_aed: Optional[float] = None
    price_currency: Optional[str] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    area_unit: Optional[str] = None
    furnishing: Optional[str] = None
    service_charge: Optional[str] = None
    parking: Optional[str] = None
    has_escrow: bool = False
    post_handover: bool = False
    is_partner_project: bool = False
    coordinates_text: Optional[str] = None
    overview: Optional[str] = None
    website: Optional[str] = None
    video_url: Optional[str] = None
    brochure_url: Optional[str] = None
    layouts_pdf: Optional[str] = None
    permit_id: Optional[str] = None

    # Media and related entities
    cover_image: Optional[ImageInput] = None
    lobby_images: List[ImageInput] = Field(default_factory=list)
    interior_images: List[ImageInput] = Field(default_factory=list)
    architecture_images: List[ImageInput] = Field(default_factory=list)
    master_plan_images: List[ImageInput] = Field(default_factory=list)

    developer: DeveloperFormData = Field(default_factory=DeveloperFormData)
    developer_id: Optional[int] = None
    buildings: List[BuildingFormData] = Field(default_factory=list)
    unit_blocks: List[UnitBlockFormData] = Field(default_factory=list)
    payment_plans: List[PaymentPlanFormData] = Field(default_factory=list)
    facilities: List[FacilityFormData] = Field(default_factory=list)
    map_points: List[MapPointFormData] = Field(default_factory=list)

    # Legacy wizard values kept for round-tripping
    cover_url: Optional[str] = None
    image_urls: Optional[str] = None


class DeveloperPayload(BaseModel):
    name: str
    description: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    office_address: Optional[str] = None
    logo: Optional[ImageInput] = None
    working_hours: Optional[str] = None


class BuildingPayload(BaseModel):
    external_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    completion_date: Optional[str] = None
    image_url: Optional[str] = None


class UnitBlockPayload(BaseModel):
    """Unit block with both area units and AED prices filled in where derivable."""

    normalized_type: str
    unit_bedrooms: Optional[str] = None
    units_amount: Optional[int] = None
    typical_unit_image_url: Optional[str] = None
    unit_type: str
    price_currency: Optional[str] = None
    units_area_from_m2: Optional[float] = None
    units_area_to_m2: Optional[float] = None
    area_unit: Optional[str] = None
    units_area_from: Optional[float] = None
    units_area_to: Optional[float] = None
    units_price_from: Optional[float] = None
    units_price_to: Optional[float] = None
    units_price_from_aed: Optional[float] = None
    units_price_to_aed: Optional[float] = None


class PaymentPlanPayload(BaseModel):
    plan_name: str
    months_after_handover: Optional[int] = None
    payments_raw: Optional[Any] = None
    payment_steps: Optional[str] = None


class FacilityPayload(BaseModel):
    name: str
    image: Optional[ImageInput] = None
    image_source: Optional[str] = None
    image_url: Optional[str] = None


class MapPointPayload(BaseModel):
    name: str
    distance_km: Optional[float] = None


class PropertyPayload(BaseModel):
    """What gets sent for storage; every optional section is None when empty."""

    external_id: Optional[str] = None
    slug: Optional[str] = None
    name: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    developer: Optional[str] = None
    developer_data: Optional[DeveloperPayload] = None
    status: Optional[str] = None
    readiness: Optional[float] = None
    sale_status: Optional[str] = None
    completion_datetime: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    price_currency: Optional[str] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    area_unit: Optional[str] = None
    furnishing: Optional[str] = None
    service_charge: Optional[str] = None
    parking: Optional[str] = None
    has_escrow: bool = False
    post_handover: bool = False
    is_partner_project: bool = False
    coordinates_text: Optional[str] = None
    overview: Optional[str] = None
    website: Optional[str] = None
    video_url: Optional[str] = None
    brochure_url: Optional[str] = None
    layouts_pdf: Optional[str] = None
    permit_id: Optional[str] = None
    cover: Optional[ImageInput] = None
    lobby: Optional[List[ImageInput]] = None
    interior: Optional[List[ImageInput]] = None
    architecture: Optional[List[ImageInput]] = None
    master_plan: Optional[List[ImageInput]] = None
    buildings: Optional[List[BuildingPayload]] = None
    unit_blocks: Optional[List[UnitBlockPayload]] = None
    payment_plans: Optional[List[PaymentPlanPayload]] = None
    facilities: Optional[List[FacilityPayload]] = None
    map_points: Optional[List[MapPointPayload]] = None


class ValidationIssue(BaseModel):
    """Form issue; errors block submission, warnings do not."""

    path: str = Field(..., examples=["unit_blocks[0].units_amount"])
    severity: Literal["error", "warning"]
    message: str


class PayloadPreviewResponse(BaseModel):
    """Payload together with the issues found in the form."""

    payload: PropertyPayload
    issues: List[ValidationIssue] = Field(default_factory=list)
    valid: bool = Field(..., description="True when no issue has severity 'error'")

"""
Schemas for the bulk property entry endpoint.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional

from propzing.schemas.wizard import UnitType, Building, Facility, MapPoint, PaymentPlan
from propzing.schemas.submission import SectionReport


class EntryProperty(BaseModel):
    """Property columns accepted by the entry endpoint."""

    model_config = ConfigDict(extra="ignore")

    external_id: str = Field(..., min_length=1, examples=["PRJ-001"])
    name: str = Field(..., min_length=1, examples=["Marina Heights"])
    slug: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    coordinates: Optional[str] = Field(None, examples=["25.0800,55.1400"])
    website: Optional[str] = None
    status: Optional[str] = None
    sale_status: Optional[str] = None
    completion_datetime: Optional[str] = None
    readiness: Optional[float] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    price_currency: Optional[str] = None
    service_charge: Optional[str] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    area_unit: Optional[str] = None
    furnishing: Optional[str] = None
    has_escrow: bool = False
    post_handover: bool = False
    cover_url: Optional[str] = None
    video_url: Optional[str] = None
    brochure_url: Optional[str] = None
    layouts_pdf: Optional[str] = None
    parking_specs: Optional[str] = None
    overview: Optional[str] = None

    @field_validator("external_id", "name")
    @classmethod
    def strip_required(cls, v):
        if not v.strip():
            raise ValueError("Value cannot be blank")
        return v.strip()


class EntryDeveloper(BaseModel):
    """Developer details; matched to existing developers by name."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    office_address: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    working_hours: Optional[Any] = None


class PropertyEntryRequest(BaseModel):
    """Whole project submitted in one request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    property: EntryProperty
    unit_types: List[UnitType] = Field(default_factory=list, alias="unitTypes")
    buildings: List[Building] = Field(default_factory=list)
    facilities: List[Facility] = Field(default_factory=list)
    map_points: List[MapPoint] = Field(default_factory=list, alias="mapPoints")
    images: Optional[str] = Field(None, description="Image URLs separated by newlines or commas")
    payment_plans: List[PaymentPlan] = Field(
        default_factory=list,
        alias="paymentPlans",
        description="Plans whose payment_steps are separated by '|'"
    )
    developer: EntryDeveloper = Field(default_factory=EntryDeveloper)

    @field_validator("unit_types", "buildings", "facilities", "map_points", "payment_plans", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return v if v is not None else []


class PropertyEntryResponse(BaseModel):
    success: bool
    property_id: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None
    sections: List[SectionReport] = Field(default_factory=list)

"""
Property listing models.
A property owns its images, unit blocks, buildings, map points and payment plans.
"""

from sqlalchemy import String, Text, Integer, Float, Numeric, Boolean, ForeignKey, Index, JSON, BigInteger
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from propzing.database import Base
import enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from propzing.models.developer import PartnerDeveloper, DataSource
    from propzing.models.facility import PropertyFacility


JSONType = JSON().with_variant(JSONB, "postgresql")
Money = Numeric(precision=16, scale=2, asdecimal=False)

# Columns never recorded in the property changelog
CHANGELOG_EXCLUDED_FIELDS = {"changelog", "updated_at", "created_at"}


class ImageCategory(str, enum.Enum):
    """Category of a stored property image."""
    COVER = "cover"
    ADDITIONAL = "additional"
    LOBBY = "lobby"
    INTERIOR = "interior"
    ARCHITECTURE = "architecture"
    MASTER_PLAN = "master_plan"


class Property(Base):
    """
    Real-estate project listing.
    Prices are stored at face value in price_currency plus a base-currency (AED) range.
    """

    __tablename__ = "properties"

    # Identity
    external_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Identifier from the originating data entry"
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    slug: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True, index=True)

    developer_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("partner_developers.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Location & contact
    area: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    coordinates_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    # Status & timeline
    status: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    sale_status: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    completion_datetime: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    readiness: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    permit_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="RERA number / permit ID")

    # Pricing & terms
    min_price: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    max_price: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    min_price_aed: Mapped[Optional[float]] = mapped_column(Money, nullable=True, index=True)
    max_price_aed: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    price_currency: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    service_charge: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    min_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    area_unit: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    furnishing: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    has_escrow: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    post_handover: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_partner_project: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Media & description
    cover_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    brochure_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    layouts_pdf: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    parking: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    overview: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    changelog: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Field-level change history appended on every update"
    )

    # Relationships
    developer: Mapped[Optional["PartnerDeveloper"]] = relationship(
        "PartnerDeveloper",
        back_populates="properties",
        lazy="selectin"
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.category, PropertyImage.id"
    )

    unit_blocks: Mapped[List["PropertyUnitBlock"]] = relationship(
        "PropertyUnitBlock",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyUnitBlock.id"
    )

    buildings: Mapped[List["PropertyBuilding"]] = relationship(
        "PropertyBuilding",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyBuilding.id"
    )

    facility_links: Mapped[List["PropertyFacility"]] = relationship(
        "PropertyFacility",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyFacility.id"
    )

    map_points: Mapped[List["PropertyMapPoint"]] = relationship(
        "PropertyMapPoint",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyMapPoint.sequence, PropertyMapPoint.id"
    )

    payment_plans: Mapped[List["PropertyPaymentPlan"]] = relationship(
        "PropertyPaymentPlan",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyPaymentPlan.id"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, external_id={self.external_id}, name={self.name})>"

    @property
    def developer_name(self) -> Optional[str]:
        return self.developer.name if self.developer else None

    def to_dict(self) -> dict:
        """Flat dictionary of the property's own columns plus developer name."""
        return {
            "id": self.id,
            "external_id": self.external_id,
            "name": self.name,
            "slug": self.slug,
            "developer_id": self.developer_id,
            "developer": self.developer_name,
            "area": self.area,
            "city": self.city,
            "country": self.country,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "coordinates_text": self.coordinates_text,
            "website": self.website,
            "status": self.status,
            "sale_status": self.sale_status,
            "completion_datetime": self.completion_datetime,
            "readiness": self.readiness,
            "permit_id": self.permit_id,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "min_price_aed": self.min_price_aed,
            "max_price_aed": self.max_price_aed,
            "price_currency": self.price_currency,
            "service_charge": self.service_charge,
            "min_area": self.min_area,
            "max_area": self.max_area,
            "area_unit": self.area_unit,
            "furnishing": self.furnishing,
            "has_escrow": self.has_escrow,
            "post_handover": self.post_handover,
            "is_partner_project": self.is_partner_project,
            "cover_url": self.cover_url,
            "video_url": self.video_url,
            "brochure_url": self.brochure_url,
            "layouts_pdf": self.layouts_pdf,
            "parking": self.parking,
            "overview": self.overview,
            "changelog": list(self.changelog or []),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class PropertyImage(Base):
    """Image attached to a property, grouped by category."""

    __tablename__ = "property_images"

    property_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)

    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="images")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": self.property_id,
            "image_url": self.image_url,
            "category": self.category,
        }


class PropertyUnitBlock(Base):
    """A unit type offered in a project (e.g. 2BR apartments) with area and price ranges."""

    __tablename__ = "property_unit_blocks"

    property_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    source_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("data_sources.id", ondelete="SET NULL"),
        nullable=True
    )

    external_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    unit_type: Mapped[str] = mapped_column(String(100), nullable=False)
    normalized_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    unit_bedrooms: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    units_amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    units_area_from_m2: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    units_area_to_m2: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    units_price_from: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    units_price_to: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    price_currency: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    units_price_from_aed: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    units_price_to_aed: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    typical_unit_image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="unit_blocks")
    source: Mapped[Optional["DataSource"]] = relationship("DataSource", lazy="selectin")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": self.property_id,
            "source_id": self.source_id,
            "external_id": self.external_id,
            "unit_type": self.unit_type,
            "normalized_type": self.normalized_type,
            "unit_bedrooms": self.unit_bedrooms,
            "units_amount": self.units_amount,
            "units_area_from_m2": self.units_area_from_m2,
            "units_area_to_m2": self.units_area_to_m2,
            "units_price_from": self.units_price_from,
            "units_price_to": self.units_price_to,
            "price_currency": self.price_currency,
            "units_price_from_aed": self.units_price_from_aed,
            "units_price_to_aed": self.units_price_to_aed,
            "typical_unit_image_url": self.typical_unit_image_url,
        }


class PropertyBuilding(Base):
    """Building (tower, block) belonging to a project."""

    __tablename__ = "property_buildings"

    property_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    external_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completion_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="buildings")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": self.property_id,
            "external_id": self.external_id,
            "name": self.name,
            "description": self.description,
            "completion_date": self.completion_date,
            "image_url": self.image_url,
        }


class PropertyMapPoint(Base):
    """Point of interest near a project, with its distance."""

    __tablename__ = "property_map_points"

    property_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    source_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("data_sources.id", ondelete="SET NULL"),
        nullable=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    distance_km: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sequence: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="map_points")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": self.property_id,
            "source_id": self.source_id,
            "name": self.name,
            "distance_km": self.distance_km,
            "sequence": self.sequence,
        }


class PropertyPaymentPlan(Base):
    """Named payment plan; its steps live in payment_plan_values."""

    __tablename__ = "property_payment_plans"

    property_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="payment_plans")

    values: Mapped[List["PaymentPlanValue"]] = relationship(
        "PaymentPlanValue",
        back_populates="plan",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PaymentPlanValue.sequence"
    )

    def to_dict(self, include_values: bool = True) -> dict:
        result = {
            "id": self.id,
            "property_id": self.property_id,
            "name": self.name,
            "description": self.description,
        }
        if include_values:
            result["values"] = [value.to_dict() for value in self.values]
        return result


class PaymentPlanValue(Base):
    """One step of a payment plan, e.g. '20% on booking'."""

    __tablename__ = "payment_plan_values"

    property_payment_plan_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("property_payment_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value_raw: Mapped[str] = mapped_column(String(255), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    plan: Mapped["PropertyPaymentPlan"] = relationship("PropertyPaymentPlan", back_populates="values")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_payment_plan_id": self.property_payment_plan_id,
            "name": self.name,
            "value_raw": self.value_raw,
            "sequence": self.sequence,
        }


# Dashboard listing filters
status_created_index = Index(
    "idx_properties_status_created",
    Property.status,
    Property.created_at.desc()
)

developer_created_index = Index(
    "idx_properties_developer_created",
    Property.developer_id,
    Property.created_at.desc()
)

"""
Facility master table and its link to properties.
"""

from sqlalchemy import String, ForeignKey, BigInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from propzing.database import Base
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from propzing.models.property import Property


class Facility(Base):
    """Amenity shared across projects, e.g. 'Swimming Pool'."""

    __tablename__ = "facilities"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


class PropertyFacility(Base):
    """A facility offered by a specific property, with its own image."""

    __tablename__ = "property_facilities"
    __table_args__ = (
        UniqueConstraint("property_id", "facility_id", name="uq_property_facility"),
    )

    property_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    facility_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("facilities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    image_source: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="facility_links")
    facility: Mapped["Facility"] = relationship("Facility", lazy="selectin")

    def to_dict(self) -> dict:
        """Facility fields with the link row nested, as the dashboard expects."""
        return {
            "id": self.facility.id if self.facility else self.facility_id,
            "name": self.facility.name if self.facility else None,
            "property_facility": {
                "id": self.id,
                "property_id": self.property_id,
                "facility_id": self.facility_id,
                "image_url": self.image_url,
                "image_source": self.image_source,
            },
        }

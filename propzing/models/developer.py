"""
Developer and data source reference models.
Both are shared rows looked up by name and reused across properties.
"""

from sqlalchemy import String, Text, ForeignKey, JSON, BigInteger
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from propzing.database import Base
from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from propzing.models.property import Property


class DataSource(Base):
    """Origin of imported or manually entered rows (e.g. 'manual-entry')."""

    __tablename__ = "data_sources"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "description": self.description}


class PartnerDeveloper(Base):
    """
    Real-estate developer company.
    Developer names are unique; working_hours is free-form JSON.
    """

    __tablename__ = "partner_developers"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Developer company name"
    )

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    office_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    working_hours: Mapped[Optional[Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=True
    )

    source_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("data_sources.id", ondelete="SET NULL"),
        nullable=True
    )

    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="developer",
        lazy="raise",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<PartnerDeveloper(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "office_address": self.office_address,
            "website": self.website,
            "logo_url": self.logo_url,
            "description": self.description,
            "working_hours": self.working_hours,
            "source_id": self.source_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

"""
Pydantic schemas for partner developer management.
"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional


class DeveloperBase(BaseModel):
    """Developer fields shared by create and update."""

    name: str = Field(..., max_length=255, description="Developer company name", examples=["Emaar Properties"])
    email: Optional[str] = Field(None, description="Contact email", examples=["sales@example.com"])
    phone: Optional[str] = Field(None, max_length=50)
    office_address: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    working_hours: Optional[Any] = Field(
        None,
        description="JSON object/array, a JSON string, or free text",
        examples=['{"mon-fri": "9:00-18:00"}']
    )
    source_id: Optional[int] = None


class DeveloperCreate(DeveloperBase):
    """Schema for creating a developer."""


class DeveloperUpdate(DeveloperBase):
    """Schema for updating a developer; the record is replaced as a whole."""


class DeveloperResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    office_address: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    working_hours: Optional[Any] = None
    source_id: Optional[int] = None
    created_at: Optional[str] = None


class DeveloperListResponse(BaseModel):
    developers: List[DeveloperResponse]
    total: int

"""
Schemas for presigned and direct uploads.
Request and response keys keep the camelCase names the upload widget sends.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

FileCategoryName = Literal["image", "video", "document", "file"]


class PresignRequest(BaseModel):
    """Request for a presigned PUT URL."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName", min_length=1, examples=["lobby.jpg"])
    file_type: str = Field(..., alias="fileType", min_length=1, examples=["image/jpeg"])
    category: FileCategoryName = Field(..., examples=["image"])
    file_size: Optional[int] = Field(None, alias="fileSize", ge=0, description="Size in bytes")


class PresignResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    upload_url: str = Field(..., alias="uploadUrl")
    public_url: str = Field(..., alias="publicUrl")
    key: str


class UploadResponse(BaseModel):
    """Stored file, in the ImageInput shape plus storage key."""

    success: bool = True
    url: str
    key: str
    name: str
    path: str
    mime: str
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    size_label: str = Field(..., description="Human readable size, e.g. '1.5 MB'")

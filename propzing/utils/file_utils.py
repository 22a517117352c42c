"""
File upload utilities for validating uploads and building storage keys.
Provides category limits, MIME checks, object key generation and local storage for development.
"""

import io
import math
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles

from propzing.config import get_settings
from propzing.utils.conversions import round_half_up
from propzing.utils.exceptions import (
    FileSizeExceededError,
    UnsupportedFileTypeError,
    FileUploadError,
)

settings = get_settings()


FILE_CATEGORIES = ("image", "video", "document", "file")

# Category -> accepted MIME types; "file" accepts anything
ALLOWED_TYPES: Dict[str, List[str]] = {
    "image": ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"],
    "video": ["video/mp4", "video/webm", "video/quicktime"],
    "document": [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ],
}

CATEGORY_FOLDERS = {
    "image": "images",
    "video": "videos",
    "document": "documents",
    "file": "files",
}

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def get_max_file_size(category: str) -> int:
    """Images are capped separately from every other category."""
    return settings.max_image_size if category == "image" else settings.max_file_size


def format_file_size(size: int) -> str:
    """
    Human readable size with up to 2 decimals.

    Example:
        format_file_size(1536) -> "1.5 KB"
    """
    if size <= 0:
        return "0 Bytes"
    index = min(int(math.floor(math.log(size) / math.log(1024))), len(SIZE_UNITS) - 1)
    value = round_half_up(size / math.pow(1024, index))
    number = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{number} {SIZE_UNITS[index]}"


def sanitize_filename(filename: str) -> str:
    """Replace every character outside [a-zA-Z0-9.-] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def get_folder(category: str) -> str:
    return CATEGORY_FOLDERS.get(category, "files")


def build_object_key(filename: str, category: str, now: Optional[datetime] = None) -> str:
    """
    Build a unique object key for an upload.

    Args:
        filename: Original file name
        category: Upload category, picks the top-level folder
        now: Timestamp to use (defaults to current UTC time)

    Returns:
        Key shaped like "images/2025-01-31/1738281600000-k3j9x0a1b2c3d-photo.jpg"
    """
    now = now or datetime.now(timezone.utc)
    timestamp_ms = int(now.timestamp() * 1000)
    random_part = uuid.uuid4().hex[:13]
    day_folder = now.strftime("%Y-%m-%d")
    return f"{get_folder(category)}/{day_folder}/{timestamp_ms}-{random_part}-{sanitize_filename(filename)}"


class FileValidator:
    """Utility class for upload validation."""

    @classmethod
    def validate_category(cls, category: str) -> str:
        if category not in FILE_CATEGORIES:
            raise FileUploadError(
                f"Unknown category '{category}'. Supported categories: {', '.join(FILE_CATEGORIES)}"
            )
        return category

    @classmethod
    def validate_file_size(cls, file_size: Optional[int], category: str) -> Optional[int]:
        """
        Validate file size against the category limit.

        Args:
            file_size: Size in bytes, unknown sizes are not checked
            category: Upload category

        Raises:
            FileSizeExceededError: If the size is over the category limit
        """
        if file_size is None:
            return None

        max_size = get_max_file_size(category)
        if file_size > max_size:
            raise FileSizeExceededError(category, max_size, file_size)
        return file_size

    @classmethod
    def validate_file_type(cls, mime_type: str, category: str) -> str:
        """
        Validate MIME type for the category.

        Raises:
            UnsupportedFileTypeError: If the category restricts types and this one is not listed
        """
        allowed = ALLOWED_TYPES.get(category)
        if allowed and mime_type not in allowed:
            raise UnsupportedFileTypeError(category, allowed)
        return mime_type

    @classmethod
    def validate_upload(cls, filename: Optional[str], mime_type: Optional[str],
                        file_size: Optional[int], category: str) -> None:
        """Run every check an upload has to pass, size first."""
        if not filename or not mime_type or not category:
            raise FileUploadError("Missing required fields")
        cls.validate_category(category)
        cls.validate_file_size(file_size, category)
        cls.validate_file_type(mime_type, category)


def get_image_dimensions(content: bytes) -> Tuple[Optional[int], Optional[int]]:
    """
    Read width and height from image bytes.

    Returns:
        (width, height), or (None, None) if the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            width, height = img.size
            return width, height
    except (UnidentifiedImageError, OSError):
        return None, None


class FileStorage:
    """Local disk storage used when object storage is not configured in development."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path_for_key(self, key: str) -> Path:
        return self.base_dir / key

    def public_url(self, key: str) -> str:
        return f"{settings.local_upload_base_url.rstrip('/')}/{key}"

    async def save_bytes(self, key: str, content: bytes) -> int:
        """
        Write content under the key.

        Returns:
            Number of bytes written

        Raises:
            FileUploadError: If the file cannot be written
        """
        file_path = self.path_for_key(key)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
            return len(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            raise FileUploadError(f"Failed to save file: {str(e)}")

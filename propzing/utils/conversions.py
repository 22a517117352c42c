"""
Unit, currency and identifier conversions shared by the payload builder and submission pipelines.
"""

import logging
import math
import re
from typing import List, Optional, Tuple

from propzing.config import settings

logger = logging.getLogger(__name__)

SQFT_PER_M2 = 10.7639

BLOB_URL_PREFIX = "blob:"


def m2_to_sqft(m2: Optional[float]) -> Optional[float]:
    """Convert square meters to square feet."""
    if m2 is None:
        return None
    return m2 * SQFT_PER_M2


def sqft_to_m2(sqft: Optional[float]) -> Optional[float]:
    """Convert square feet to square meters."""
    if sqft is None:
        return None
    return sqft / SQFT_PER_M2


def round_half_up(value: float, digits: int = 2) -> float:
    """Round like Math.round: halves go up, not to even."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def convert_to_aed(amount: Optional[float], from_currency: Optional[str]) -> Optional[float]:
    """
    Convert an amount to the base currency using the configured fixed rates.

    Args:
        amount: Amount in from_currency
        from_currency: ISO currency code, case-insensitive for rate lookup

    Returns:
        Amount in AED rounded to 2 decimals, the amount unchanged when it is
        already AED, or None when amount/currency is missing or the currency is unknown
    """
    if amount is None or not from_currency:
        return None
    if from_currency == settings.base_currency:
        return amount

    rate = settings.exchange_rates.get(from_currency.upper())
    if not rate:
        logger.warning(f"Unknown currency {from_currency}, cannot convert to {settings.base_currency}")
        return None

    return round_half_up(amount * rate)


def price_to_aed(amount: Optional[float], currency: Optional[str]) -> Optional[float]:
    """Property-level conversion: falsy amounts give None, AED passes through."""
    if not amount:
        return None
    if currency == settings.base_currency:
        return amount
    return convert_to_aed(amount, currency)


def parse_coordinates(text: Optional[str]) -> Tuple[Optional[float], Optional[float]]:
    """
    Parse a "lat,lng" string.

    Returns:
        (latitude, longitude), or (None, None) when the text is not two numbers
    """
    if not text or not text.strip():
        return None, None

    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 2:
        return None, None

    try:
        latitude, longitude = float(parts[0]), float(parts[1])
    except ValueError:
        return None, None

    if math.isnan(latitude) or math.isnan(longitude):
        return None, None
    return latitude, longitude


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def generate_hash_id(value: str) -> int:
    """
    Deterministic non-positive 32-bit id derived from a string.

    Uses the classic ``hash * 31 + char`` string hash over UTF-16 code units,
    wrapped to a signed 32-bit integer, and negated so generated ids never
    collide with sequence-assigned positive ids.
    """
    result = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        result = _to_int32((result << 5) - result + code_unit)
    return -abs(result)


def split_list(value: Optional[str], separators: str = ",") -> List[str]:
    """Split on any of the separator characters, trimming and dropping empty items."""
    if not value:
        return []
    pattern = "[" + re.escape(separators) + "]"
    return [item.strip() for item in re.split(pattern, value) if item.strip()]


def is_persistent_url(url: Optional[str]) -> bool:
    """Browser-local blob: URLs stop working after reload and are never stored."""
    return bool(url and url.strip() and not url.startswith(BLOB_URL_PREFIX))


def clean_str(value: Optional[str]) -> Optional[str]:
    """Trim a string, turning blank values into None."""
    if value is None:
        return None
    value = value.strip()
    return value or None

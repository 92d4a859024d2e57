"""
Value parsing helpers shared by the extraction strategies.

Every helper returns None instead of raising when the input is unusable.
"""
import json
import math
import re
from typing import Any, Optional

DESCRIPTION_MAX_LENGTH = 1000

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_COUNT_RE = re.compile(r"\d[\d,]*")


def try_json_loads(raw: Optional[str]) -> Optional[Any]:
    """Parse JSON text, returning None on any decode failure."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (ValueError, TypeError):
        return None


def parse_number(text: Optional[str]) -> Optional[float]:
    """Return the first numeric substring of text as a float."""
    if not text:
        return None
    match = _NUMBER_RE.search(text.replace(",", ""))
    if not match:
        return None
    return finite_or_none(float(match.group()))


def parse_count(text: Optional[str]) -> Optional[int]:
    """Return the first digit-and-comma run of text as an int."""
    if not text:
        return None
    match = _COUNT_RE.search(text)
    if not match:
        return None
    return int(match.group().replace(",", ""))


def parse_title(text: Optional[str]) -> Optional[str]:
    """Accept a heading only when it is longer than 10 and shorter than 500 chars."""
    if not text:
        return None
    text = text.strip()
    if 10 < len(text) < 500:
        return text
    return None


def clip_description(text: Optional[str]) -> Optional[str]:
    """Trim and truncate description text; empty text is rejected."""
    if not text:
        return None
    text = text.strip()
    return text[:DESCRIPTION_MAX_LENGTH] or None


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Drop inf and NaN, which json.loads produces for 1e400, Infinity and NaN."""
    if value is None or not math.isfinite(value):
        return None
    return value


def to_float(value: Any) -> Optional[float]:
    """Coerce JSON scalars (numbers or numeric strings) to a finite float."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return finite_or_none(float(value)) if abs(value) < 10 ** 308 else None
    if isinstance(value, float):
        return finite_or_none(value)
    if isinstance(value, str):
        return parse_number(value)
    return None


def to_int(value: Any) -> Optional[int]:
    """Coerce JSON scalars (numbers or numeric strings) to int."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return parse_count(value)
    return None


def to_text(value: Any) -> Optional[str]:
    """Return a stripped string for non-empty string values."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None

"""Shared validation utilities"""

import re
from typing import Optional

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def clean_text(value: Optional[str], max_length: int, field: str = "Value") -> Optional[str]:
    """
    Strip surrounding whitespace and control characters.

    Raises:
        ValueError: If the cleaned value exceeds max_length
    """
    if value is None:
        return None

    value = CONTROL_CHARS.sub("", str(value)).strip()

    if len(value) > max_length:
        raise ValueError(f"{field} exceeds maximum length of {max_length} characters")

    return value


def validate_required_text(value: Optional[str], max_length: int, field: str) -> str:
    """Like clean_text, but empty input is an error"""
    value = clean_text(value, max_length, field)
    if not value:
        raise ValueError(f"{field} is required")
    return value

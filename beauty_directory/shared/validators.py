"""Shared validation utilities"""

import math
import re
from typing import Optional

from ..models import LOCATION_TYPES

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]+$")


def validate_username(username: Optional[str]) -> Optional[str]:
    """
    Validate a username.

    Usernames are stored exactly as entered (availability checks are
    case-sensitive), only surrounding whitespace is removed.

    Raises:
        ValueError: If the username is too short, too long or has invalid characters
    """
    if username is None:
        return username

    username = username.strip()

    if len(username) < USERNAME_MIN_LENGTH:
        raise ValueError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValueError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if not USERNAME_PATTERN.match(username):
        raise ValueError("Username may only contain letters, numbers, underscores and dots")

    return username


def normalize_instagram(handle: Optional[str]) -> Optional[str]:
    """Strip a leading @ and any profile URL prefix from an Instagram handle"""
    if not handle:
        return handle

    handle = handle.strip()
    handle = re.sub(r"^(https?://)?(www\.)?instagram\.com/", "", handle)
    handle = handle.lstrip("@").rstrip("/")
    return handle or None


def validate_location_type(location_type: Optional[str]) -> Optional[str]:
    if location_type is None or location_type == "":
        return None
    if location_type not in LOCATION_TYPES:
        raise ValueError(f"Location type must be one of: {', '.join(LOCATION_TYPES)}")
    return location_type


def validate_latitude(value: Optional[float]) -> Optional[float]:
    if value is None:
        return value
    if not math.isfinite(value) or not -90 <= value <= 90:
        raise ValueError("Latitude must be between -90 and 90")
    return value


def validate_longitude(value: Optional[float]) -> Optional[float]:
    if value is None:
        return value
    if not math.isfinite(value) or not -180 <= value <= 180:
        raise ValueError("Longitude must be between -180 and 180")
    return value


def has_map_coordinates(latitude, longitude) -> bool:
    """True when both coordinates are present and finite numbers"""
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        return False
    return math.isfinite(lat) and math.isfinite(lng)


def split_multi_value(values: Optional[list[str]]) -> Optional[list[str]]:
    """
    Flatten repeated and comma separated query values.

    ``["lashes,brows", "nails"]`` -> ``["lashes", "brows", "nails"]``.
    Returns None when nothing is left so callers can treat the filter as inactive.
    """
    if not values:
        return None

    flattened = []
    for value in values:
        if value is None:
            continue
        flattened.extend(part.strip() for part in value.split(",") if part.strip())

    return flattened or None

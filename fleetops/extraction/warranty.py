"""Regex extraction of warranty and vessel details from document text.

Used directly when no language model is configured, and as the fallback
when a model's answer cannot be parsed. For each field the first pattern
that matches wins.
"""

import re
from typing import Any

from fleetops.utils.logger import get_logger

logger = get_logger(__name__)

_START_DATE_PATTERNS = [
    re.compile(r"warranty\s+start\s+date[:\s]+(\d{4}-\d{2}-\d{2})", re.IGNORECASE),
    re.compile(r"start\s+date[:\s]+(\d{4}-\d{2}-\d{2})", re.IGNORECASE),
    re.compile(r"date[:\s]+(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE),
    re.compile(r"(\d{4}-\d{2}-\d{2})"),
]

# (pattern, months per unit)
_DURATION_PATTERNS = [
    (re.compile(r"warranty\s+period[:\s]+(\d+)\s+months?", re.IGNORECASE), 1),
    (re.compile(r"warranty\s+period[:\s]+(\d+)\s+years?", re.IGNORECASE), 12),
    (re.compile(r"(\d+)\s+months?\s+warranty", re.IGNORECASE), 1),
    (re.compile(r"(\d+)\s+years?\s+warranty", re.IGNORECASE), 12),
]

_MANUFACTURER_PATTERNS = [
    re.compile(r"manufacturer[:\s]+([^\n\r]+)", re.IGNORECASE),
    re.compile(r"(wärtsilä|man energy|caterpillar|rolls-royce|kongsberg)", re.IGNORECASE),
]

_EQUIPMENT_PATTERNS = [
    re.compile(r"equipment[:\s]+([^\n\r]+)", re.IGNORECASE),
    re.compile(r"(main engine|generator|propulsion|hull|navigation)", re.IGNORECASE),
]

_NAME_PATTERNS = [
    re.compile(r"vessel\s+name[:\s]+([^\n\r]+)", re.IGNORECASE),
    re.compile(r"yacht\s+name[:\s]+([^\n\r]+)", re.IGNORECASE),
    re.compile(r"m/y\s+([^\n\r]+)", re.IGNORECASE),
]

_IMO_PATTERN = re.compile(r"imo\s+number[:\s]+(\d+)", re.IGNORECASE)
_HULL_PATTERN = re.compile(r"hull\s+number[:\s]+([^\n\r]+)", re.IGNORECASE)


def _first_match(patterns: list[re.Pattern], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def _to_iso(value: str) -> str:
    """``DD/MM/YYYY`` to ``YYYY-MM-DD``; ISO input is returned unchanged."""
    if "/" not in value:
        return value
    day, month, year = value.split("/")
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def extract_warranty_fields(text: str) -> dict[str, Any]:
    """Pull warranty start date, duration, manufacturer and equipment type.

    Args:
        text: Document text.

    Returns:
        Only the fields that were found.
    """
    info: dict[str, Any] = {}

    start = _first_match(_START_DATE_PATTERNS, text)
    if start:
        info["start_date"] = _to_iso(start)

    for pattern, months_per_unit in _DURATION_PATTERNS:
        match = pattern.search(text)
        if match:
            info["duration_months"] = int(match.group(1)) * months_per_unit
            break

    manufacturer = _first_match(_MANUFACTURER_PATTERNS, text)
    if manufacturer:
        info["manufacturer"] = manufacturer

    equipment = _first_match(_EQUIPMENT_PATTERNS, text)
    if equipment:
        info["equipment_type"] = equipment

    logger.debug("Regex warranty extraction found %s", sorted(info))
    return info


def extract_yacht_fields(text: str) -> dict[str, Any]:
    """Pull vessel name, IMO number and hull number from document text."""
    info: dict[str, Any] = {}

    name = _first_match(_NAME_PATTERNS, text)
    if name:
        info["name"] = name

    imo = _IMO_PATTERN.search(text)
    if imo:
        info["imo_number"] = imo.group(1)

    hull = _HULL_PATTERN.search(text)
    if hull:
        info["hull_number"] = hull.group(1).strip()

    return info

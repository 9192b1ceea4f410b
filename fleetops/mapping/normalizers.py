"""Value normalisation for scanned registration certificates.

Converts the free-text values Document AI returns (dates written out in
words, dimensions with units, engine power summaries) into the formats
stored on a yacht profile. All functions are pure and never raise on
unexpected input; unrecognised values come back unchanged or as ``None``.
"""

import re

_MONTHS: dict[str, int] = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\s+(\d{4})$")
_MONTH_YEAR = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")
_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
_COMBINED_KW = re.compile(r"Combined KW\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
_YEAR = re.compile(r"(20\d{2}|19\d{2})")
_BUILDER = re.compile(
    r"^(\d{4}\s+)?([A-Z\s&]+?)(?:,|\s+LIMITED|\s+LTD|\s+INC)", re.IGNORECASE
)
_OWNER_NAME = re.compile(r"^([A-Z\s&]+?)(?:\s+\d|\s+LTD)")

_NUMERIC_DATE_FORMATS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$"), "dmy"),
    (re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})$"), "ymd"),
    (re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$"), "dmy_short"),
]

FLAG_STATES: dict[str, str] = {
    "VALLETTA": "Malta",
    "MONACO": "Monaco",
    "GIBRALTAR": "Gibraltar",
    "LONDON": "United Kingdom",
    "FORT LAUDERDALE": "United States",
    "MIAMI": "United States",
}


def month_number(name: str) -> int:
    """Return the month number for an English month name.

    Full and three-letter names are accepted in any case. Unknown names
    map to January.
    """
    return _MONTHS.get(name.lower(), 1)


def format_date_dd_mm_yyyy(value: str | None) -> str | None:
    """Format a written-out certificate date as ``DD-MM-YYYY``.

    ``"10 December 2020"`` becomes ``"10-12-2020"`` and ``"December 2020"``
    becomes ``"01-12-2020"``. Values in any other shape, including ones
    already formatted, are returned unchanged.

    Args:
        value: Date text as read from the certificate.

    Returns:
        The formatted date, or the input when it is not recognised.
    """
    if not value or not isinstance(value, str):
        return value

    match = _DAY_MONTH_YEAR.match(value)
    if match:
        day, month, year = match.groups()
        return f"{day.zfill(2)}-{month_number(month):02d}-{year}"

    match = _MONTH_YEAR.match(value)
    if match:
        month, year = match.groups()
        return f"01-{month_number(month):02d}-{year}"

    return value


def normalize_numeric_date(value: str) -> str:
    """Normalise a numeric date to ``DD-MM-YYYY``.

    Handles ``DD/MM/YYYY``, ``YYYY-MM-DD`` and ``DD/MM/YY`` with any of
    ``/``, ``-`` or ``.`` as separator. Two-digit years below 50 are read
    as 20YY, the rest as 19YY. Characters other than digits and
    separators are dropped first; an unrecognised result is returned in
    that cleaned form.
    """
    cleaned = re.sub(r"[^\d/\-.]", "", value)

    for pattern, order in _NUMERIC_DATE_FORMATS:
        match = pattern.match(cleaned)
        if not match:
            continue
        if order == "ymd":
            year, month, day = match.groups()
        else:
            day, month, year = match.groups()
            if order == "dmy_short":
                year = f"20{year}" if int(year) < 50 else f"19{year}"
        return f"{day.zfill(2)}-{month.zfill(2)}-{year}"

    return cleaned


def extract_numeric_value(value: str | None) -> float | None:
    """Return the first number found in ``value``, e.g. ``28.06`` from ``"28.06 m"``."""
    if value is None:
        return None
    if isinstance(value, int | float):
        return float(value)
    match = _NUMBER.search(value)
    return float(match.group(1)) if match else None


def extract_engine_kw(value: str | None) -> float | None:
    """Return engine power in KW.

    A ``Combined KW <n>`` summary takes precedence over any other number
    in the text, so ``"2 x 1432 Combined KW 2864"`` yields ``2864``.
    """
    if not value:
        return None
    match = _COMBINED_KW.search(value) or _NUMBER.search(value)
    return float(match.group(1)) if match else None


def extract_year(value: str | None) -> int | None:
    """Return the first 19xx or 20xx year in ``value``."""
    if not value:
        return None
    match = _YEAR.search(value)
    return int(match.group(1)) if match else None


def extract_amount_text(value: str) -> str:
    """Return the first number in ``value`` as text with thousands separators removed."""
    match = re.search(r"[\d,]+\.?\d*", value)
    return match.group(0).replace(",", "") if match else value


def vessel_type(description: str) -> str:
    """Classify a vessel description into a yacht type."""
    desc = description.upper()
    if "COMMERCIAL" in desc:
        return "Commercial Vessel"
    if "PLEASURE" in desc or "PRIVATE" in desc:
        return "Motor Yacht"
    if "SAILING" in desc:
        return "Sailing Yacht"
    return "Motor Yacht"


def vessel_category(description: str) -> str:
    """Classify a vessel description into Commercial, Charter or Private use."""
    desc = description.upper()
    if "COMMERCIAL" in desc:
        return "Commercial"
    if "CHARTER" in desc:
        return "Charter"
    return "Private"


def flag_state(home_port: str) -> str:
    """Return the flag state for a known home port, else the port itself."""
    return FLAG_STATES.get(home_port.upper(), home_port)


def parse_build_info(text: str) -> tuple[int | None, str | None]:
    """Split a "when and where built" entry into build year and builder.

    Args:
        text: e.g. ``"2019 SUNSEEKER INTERNATIONAL LIMITED, POOLE"``.

    Returns:
        ``(year, builder)``; either may be ``None``.
    """
    year = extract_year(text)
    match = _BUILDER.match(text)
    builder = match.group(2).strip() if match else None
    return year, builder or None


def owner_type(description: str) -> str:
    """Return ``Individual`` for sole owners, otherwise ``Company``."""
    return "Individual" if "SOLE OWNER" in description else "Company"


def owner_name(residence: str) -> str:
    """Pull the owner's name off the front of an owner residence entry."""
    match = _OWNER_NAME.match(residence)
    return match.group(1).strip() if match else ""


def title_case_name(name: str) -> str:
    """Capitalise each space-separated word of a name."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.strip().split(" "))

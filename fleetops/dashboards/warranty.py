"""Warranty status check for claims and repairs."""

import calendar
from dataclasses import dataclass, field
from datetime import date

from fleetops.utils.logger import get_logger

from .dates import as_date, days_until

logger = get_logger(__name__)

MANUFACTURER_CONTACTS: dict[str, dict[str, str]] = {
    "caterpillar": {
        "phone": "+1-800-CAT-HELP",
        "email": "marine.support@cat.com",
        "website": "https://www.cat.com/marine",
    },
    "cummins": {
        "phone": "+1-800-CUMMINS",
        "email": "marine@cummins.com",
        "website": "https://www.cummins.com/marine",
    },
    "volvo": {
        "phone": "+1-855-VOLVO-13",
        "email": "marine.support@volvo.com",
        "website": "https://www.volvopenta.com",
    },
}

GENERIC_CONTACT = {
    "phone": "Contact manufacturer",
    "email": "Check manufacturer website",
    "website": "Search online for contact details",
}

CLAIM_REQUIREMENTS = [
    "Original purchase receipt or invoice",
    "Photos of the defective equipment",
    "Detailed description of the failure",
    "Service history records (if applicable)",
    "Serial number verification",
    "Installation date documentation",
]


@dataclass
class WarrantyStatus:
    is_valid: bool
    status: str
    days_remaining: int | None = None
    expiry_date: str | None = None
    coverage_details: dict[str, bool] = field(default_factory=dict)
    manufacturer_contact: dict[str, str] = field(default_factory=dict)
    claim_requirements: list[str] = field(default_factory=list)
    recommended_actions: list[str] = field(default_factory=list)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def recommended_actions(status: str, days_remaining: int) -> list[str]:
    if status == "valid":
        return [
            "Proceed with warranty claim",
            "Gather required documentation",
            "Contact manufacturer for claim process",
            "Document the issue thoroughly",
        ]
    if status == "expiring_soon":
        return [
            "URGENT: Submit claim immediately",
            f"Warranty expires in {days_remaining} days",
            "Prepare all documentation quickly",
            "Contact manufacturer today",
        ]
    if status == "expired":
        return [
            "Warranty has expired - consider repair quotes",
            "Check if extended warranty is available",
            "Document for insurance claim if applicable",
            "Get repair estimates from contractors",
        ]
    return [
        "Verify warranty information",
        "Contact manufacturer for details",
        "Check purchase documentation",
    ]


def validate_warranty(
    start_date: date | str | None,
    duration_months: int | None,
    manufacturer: str | None = None,
    today: date | None = None,
    expiring_days: int = 30,
) -> WarrantyStatus:
    """Work out whether a warranty is still in force.

    Args:
        start_date: Warranty start (date or ISO string).
        duration_months: Warranty length in months.
        manufacturer: Manufacturer name, used for the contact lookup.
        today: Reference date.
        expiring_days: Days left at or below which the warranty is
            ``expiring_soon``.

    Returns:
        ``valid``, ``expiring_soon`` or ``expired``; ``unknown`` when the
        start date or duration is missing.
    """
    start = as_date(start_date)
    if start is None or not duration_months:
        return WarrantyStatus(
            is_valid=False,
            status="unknown",
            recommended_actions=["Please provide warranty start date and duration"],
        )

    today = today or date.today()
    expiry = add_months(start, int(duration_months))
    remaining = days_until(expiry, today)

    if remaining > expiring_days:
        status = "valid"
    elif remaining > 0:
        status = "expiring_soon"
    else:
        status = "expired"

    maker = (manufacturer or "").lower()
    result = WarrantyStatus(
        is_valid=status != "expired",
        status=status,
        days_remaining=max(0, remaining),
        expiry_date=expiry.isoformat(),
        coverage_details={
            "parts": True,
            "labor": True,
            "shipping": "premium" in maker,
            "on_site_service": "marine" in maker,
        },
        manufacturer_contact=dict(MANUFACTURER_CONTACTS.get(maker, GENERIC_CONTACT)),
        claim_requirements=list(CLAIM_REQUIREMENTS),
        recommended_actions=recommended_actions(status, remaining),
    )
    logger.info("Warranty expiring %s is %s", result.expiry_date, status)
    return result

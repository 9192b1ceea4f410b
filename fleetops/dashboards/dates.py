"""Date helpers shared by the dashboard calculators."""

from datetime import date, datetime


def as_date(value: date | datetime | str | None) -> date | None:
    """Parse a row's date column (ISO date or timestamp); ``None`` if unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def days_until(target: date, today: date) -> int:
    return (target - today).days

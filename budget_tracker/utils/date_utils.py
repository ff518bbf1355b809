"""Date conversions for the record store boundary"""

from datetime import date, datetime, time, timezone


def to_date_string(value: date | datetime | str) -> str:
    """Truncate to a calendar date string (YYYY-MM-DD) for due_date columns"""
    if isinstance(value, str):
        value = parse_date(value)
    if isinstance(value, datetime):
        value = value.astimezone(timezone.utc).date() if value.tzinfo else value.date()
    return value.isoformat()


def to_timestamp_string(value: date | datetime | str) -> str:
    """
    Full UTC timestamp string for payment history entries.

    Plain dates are taken as midnight UTC, e.g. 2024-03-01 -> 2024-03-01T00:00:00.000Z
    """
    if isinstance(value, str):
        value = parse_date(value)
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_date(value: str) -> date | datetime:
    """Parse a date-only or timestamp string"""
    if "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return date.fromisoformat(value)

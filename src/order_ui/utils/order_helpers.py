"""
Helper functions for order data parsing and formatting.

Provides helpers for:
- Date parsing (server timestamps, ISO and d/m/Y input)
- Timestamp formatting for mutation inputs
- Currency and date display formatting
"""

from datetime import date, datetime

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d/%m/%y",
)


def parse_date(value: str | date | None) -> datetime | None:
    """
    Parse a date string returned by the API into a datetime.

    Args:
        value: Timestamp like "2024-12-25 10:30:00", "2024-12-25",
            "25/12/2024", an ISO string, or an existing date.

    Returns:
        datetime object if parsing succeeds, None otherwise.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if value:
        value = value.strip()
    if not value:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def format_datetime(value: datetime | date | str | None) -> str | None:
    """
    Format a date for a mutation input as "YYYY-MM-DD HH:MM:SS".

    Returns None when the value is empty or unparseable.
    """
    parsed = parse_date(value)
    if parsed is None:
        return None
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_date(value: datetime | None, empty: str = "Not scheduled") -> str:
    """Format a date for display, or return the empty label."""
    if not value:
        return empty
    return value.strftime("%d/%m/%Y")


def format_currency(value: float, currency: str = "₹") -> str:
    """
    Format a currency amount with the currency symbol prefix.

    Args:
        value: Numeric amount to format.
        currency: Currency symbol or code.

    Returns:
        Formatted string like '₹1,234.56'.
    """
    return f"{currency}{value:,.2f}"

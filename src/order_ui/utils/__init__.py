"""Utility functions shared across the order UI package."""

from order_ui.utils.order_helpers import (
    format_currency,
    format_date,
    format_datetime,
    parse_date,
)

__all__ = [
    "format_currency",
    "format_date",
    "format_datetime",
    "parse_date",
]

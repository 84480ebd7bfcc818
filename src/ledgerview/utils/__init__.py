"""Utility functions for ledgerview."""

from ledgerview.utils.date_parser import parse_date, parse_instant, to_calendar_date
from ledgerview.utils.amount_parser import parse_amount, parse_number

__all__ = [
    "parse_date",
    "parse_instant",
    "to_calendar_date",
    "parse_amount",
    "parse_number",
]

"""Shared CLI rendering helpers."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

import click

from ledgerview.domain.entities import Page, Record
from ledgerview.domain.export import write_csv
from ledgerview.domain.view_engine import page_numbers
from ledgerview.utils.amount_parser import parse_number

CURRENCY_SYMBOL = "₱"


def format_currency(amount: Any) -> str:
    """Format an amount as pesos with two decimals, e.g. ``₱1,234.50``."""
    value = parse_number(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def abbreviate_amount(amount: Any, is_currency: bool = True) -> str:
    """Compact form for summary cards: ``₱1.5K``, ``₱2M``, ``-₱3.2B``.

    Trailing zeros are dropped, so ``100.50`` renders as ``₱100.5``.
    """
    value = parse_number(amount)
    if not value:
        return f"{CURRENCY_SYMBOL}0.00" if is_currency else "0"

    magnitude = abs(value)
    suffix = ""
    for threshold, unit in ((Decimal("1e9"), "B"), (Decimal("1e6"), "M"), (Decimal("1e3"), "K")):
        if magnitude >= threshold:
            magnitude = (magnitude / threshold).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            suffix = unit
            break
    else:
        magnitude = magnitude.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    text = format(magnitude.normalize(), "f")
    sign = "-" if value < 0 else ""
    prefix = CURRENCY_SYMBOL if is_currency else ""
    return f"{sign}{prefix}{text}{suffix}"


def echo_pager(page: Page) -> None:
    """Render "Showing a-b of n" plus the page button strip."""
    buttons = " ".join(
        "..." if number is None else (f"[{number}]" if number == page.index else str(number))
        for number in page_numbers(page.index, page.total_pages)
    )
    click.echo(
        f"Showing {page.start_position}-{page.end_position} of {page.total_count} "
        f"| Page {page.index} of {page.total_pages} | {buttons}"
    )


def export_rows(
    items: Sequence[Record], path: str, columns: Optional[Sequence[str]] = None
) -> None:
    """Write rows to a CSV file and report the count."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        count = write_csv(items, f, columns=columns)
    click.echo(f"Exported {count} row(s) to {path}")

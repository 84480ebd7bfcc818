"""CSV export of view rows."""

import csv
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence, TextIO

from ledgerview.domain.entities import Record


def collect_columns(items: Iterable[Record]) -> list[str]:
    """Union of record keys in first-seen order."""
    columns: dict[str, None] = {}
    for item in items:
        for key in item:
            columns.setdefault(key, None)
    return list(columns)


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def write_csv(
    items: Sequence[Record],
    stream: TextIO,
    columns: Optional[Sequence[str]] = None,
) -> int:
    """Write rows to ``stream`` as CSV with a header line.

    Args:
        items: Flat records, e.g. ``Page.items``
        stream: Text stream opened with ``newline=""``
        columns: Column order; defaults to every key seen in ``items``

    Returns:
        Number of data rows written
    """
    columns = list(columns) if columns is not None else collect_columns(items)
    writer = csv.writer(stream)
    writer.writerow(columns)
    for item in items:
        writer.writerow([format_cell(item.get(column)) for column in columns])
    return len(items)

"""Tests for CSV export."""

import csv
import io
from decimal import Decimal

from ledgerview.domain.export import collect_columns, format_cell, write_csv


def test_collect_columns_first_seen_order():
    items = [{"id": 1, "name": "a"}, {"name": "b", "balance": 2}]

    assert collect_columns(items) == ["id", "name", "balance"]


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell(True) == "true"
    assert format_cell(False) == "false"
    assert format_cell(Decimal("1E+3")) == "1000"
    assert format_cell(Decimal("12.50")) == "12.50"
    assert format_cell("text") == "text"


def test_write_csv_fills_missing_cells():
    stream = io.StringIO(newline="")
    items = [{"id": 1, "name": "Cash"}, {"id": 2, "balance": Decimal("5.00")}]

    count = write_csv(items, stream)

    rows = list(csv.reader(io.StringIO(stream.getvalue())))
    assert count == 2
    assert rows == [["id", "name", "balance"], ["1", "Cash", ""], ["2", "", "5.00"]]


def test_write_csv_with_explicit_columns():
    stream = io.StringIO(newline="")

    write_csv([{"id": 1, "name": "Cash", "extra": "x"}], stream, columns=["name", "id"])

    rows = list(csv.reader(io.StringIO(stream.getvalue())))
    assert rows == [["name", "id"], ["Cash", "1"]]


def test_write_csv_empty_items():
    stream = io.StringIO(newline="")

    count = write_csv([], stream, columns=["id"])

    assert count == 0
    assert stream.getvalue().strip() == "id"

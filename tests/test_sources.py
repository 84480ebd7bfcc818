"""Tests for record sources and envelope handling."""

import sys
from decimal import Decimal

import pytest

from ledgerview.domain.errors import NotFoundError, ValidationError
from ledgerview.sources.base import ACCOUNTS, CASH_ACCOUNTS, InMemorySource
from ledgerview.sources.envelope import fetch_all_pages, last_page_of, normalize_records
from ledgerview.sources.factories import create_snapshot_source
from ledgerview.sources.json_snapshot import JSONSnapshotSource


@pytest.mark.parametrize(
    "payload",
    [
        [{"id": 1}],
        {"data": [{"id": 1}]},
        {"accounts": [{"id": 1}]},
        {"personnel": [{"id": 1}]},
        {"data": {"data": [{"id": 1}], "last_page": 1}},
        {"success": True, "results": [{"id": 1}]},
    ],
)
def test_normalize_records_envelopes(payload):
    assert normalize_records(payload) == [{"id": 1}]


def test_normalize_records_prefers_data_key():
    assert normalize_records({"accounts": [{"id": 2}], "data": [{"id": 1}]}) == [{"id": 1}]


@pytest.mark.parametrize("payload", [None, "oops", 42, {"message": "Unauthenticated."}])
def test_normalize_records_unrecognized_is_empty(payload):
    assert normalize_records(payload) == []


def test_normalize_records_skips_non_objects(caplog):
    with caplog.at_level("WARNING", logger="ledgerview.sources.envelope"):
        records = normalize_records([{"id": 1}, "junk", None, {"id": 2}])

    assert records == [{"id": 1}, {"id": 2}]
    assert "Skipped 2" in caplog.text


@pytest.mark.parametrize(
    "payload,expected",
    [
        ({"data": [], "last_page": 3}, 3),
        ({"data": [], "meta": {"last_page": 4}}, 4),
        ({"data": [], "last_page": None, "meta": {"last_page": 2}}, 2),
        ({"data": [], "last_page": "x"}, 1),
        ({"data": [], "last_page": 0}, 1),
        ([{"id": 1}], 1),
    ],
)
def test_last_page_of(payload, expected):
    assert last_page_of(payload) == expected


def test_fetch_all_pages_concatenates_in_order():
    pages = {
        1: {"data": [{"id": 1}, {"id": 2}], "last_page": 3},
        2: {"data": [{"id": 3}], "last_page": 3},
        3: {"data": [{"id": 4}], "last_page": 3},
    }
    requested = []

    def fetch_page(page):
        requested.append(page)
        return pages[page]

    records = fetch_all_pages(fetch_page)

    assert [r["id"] for r in records] == [1, 2, 3, 4]
    assert requested == [1, 2, 3]


def test_fetch_all_pages_unpaginated_fetches_once():
    requested = []

    def fetch_page(page):
        requested.append(page)
        return [{"id": 1}]

    assert fetch_all_pages(fetch_page) == [{"id": 1}]
    assert requested == [1]


def test_fetch_all_pages_stops_at_max_pages():
    requested = []

    def fetch_page(page):
        requested.append(page)
        return {"data": [{"id": page}], "last_page": 10_000}

    records = fetch_all_pages(fetch_page, max_pages=3)

    assert requested == [1, 2, 3]
    assert len(records) == 3


def test_in_memory_source():
    source = InMemorySource({ACCOUNTS: {"accounts": [{"id": 1}]}})

    assert source.has(ACCOUNTS)
    assert source.fetch(ACCOUNTS) == [{"id": 1}]
    assert source.fetch_optional(CASH_ACCOUNTS) == []
    with pytest.raises(NotFoundError):
        source.fetch(CASH_ACCOUNTS)


def test_snapshot_source_reads_every_envelope(snapshot_source, accounts, personnel):
    assert [a["id"] for a in snapshot_source.fetch("accounts")] == [a["id"] for a in accounts]
    assert len(snapshot_source.fetch("personnel")) == len(personnel)
    assert len(snapshot_source.fetch("bills")) == 2


def test_snapshot_source_parses_floats_as_decimal(tmp_path):
    (tmp_path / "accounts.json").write_text('[{"id": 1, "balance": 0.1}]', encoding="utf-8")

    records = JSONSnapshotSource(tmp_path).fetch("accounts")

    assert records[0]["balance"] == Decimal("0.1")


def test_snapshot_source_missing_collection(tmp_path):
    source = JSONSnapshotSource(tmp_path)

    assert not source.has("accounts")
    assert source.fetch_optional("accounts") == []
    with pytest.raises(NotFoundError) as excinfo:
        source.fetch("accounts")

    assert "accounts" in str(excinfo.value)


def test_snapshot_source_malformed_json(tmp_path):
    (tmp_path / "accounts.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ValidationError) as excinfo:
        JSONSnapshotSource(tmp_path).fetch("accounts")

    assert "not valid JSON" in str(excinfo.value)


def test_snapshot_source_invalid_utf8(tmp_path):
    (tmp_path / "accounts.json").write_bytes(b'[{"account_name": "\xff\xfe"}]')

    with pytest.raises(ValidationError) as excinfo:
        JSONSnapshotSource(tmp_path).fetch("accounts")

    assert "accounts" in str(excinfo.value)


@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no integer digit limit")
def test_snapshot_source_integer_over_digit_limit(tmp_path):
    (tmp_path / "accounts.json").write_text("[{\"balance\": " + "9" * 5000 + "}]", encoding="utf-8")

    with pytest.raises(ValidationError):
        JSONSnapshotSource(tmp_path).fetch("accounts")


def test_snapshot_source_personnel_envelope(tmp_path):
    (tmp_path / "personnel.json").write_text('{"personnel": [{"id": 1, "username": "a"}]}', encoding="utf-8")

    assert JSONSnapshotSource(tmp_path).fetch("personnel") == [{"id": 1, "username": "a"}]


def test_snapshot_source_accepts_byte_order_mark(tmp_path):
    (tmp_path / "accounts.json").write_text('\ufeff[{"id": 1}]', encoding="utf-8")

    assert JSONSnapshotSource(tmp_path).fetch("accounts") == [{"id": 1}]


def test_factory_uses_explicit_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("LEDGERVIEW_DATA_DIR", "/somewhere/else")

    source = create_snapshot_source(str(tmp_path))

    assert source.data_dir == tmp_path


def test_factory_uses_environment_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("LEDGERVIEW_DATA_DIR", str(tmp_path))

    assert create_snapshot_source().data_dir == tmp_path


def test_factory_defaults_to_home_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("LEDGERVIEW_DATA_DIR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert create_snapshot_source().data_dir == tmp_path / ".ledgerview"

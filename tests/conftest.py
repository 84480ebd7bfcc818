"""Shared pytest fixtures for ledgerview tests."""

import json
import pytest

from ledgerview.domain.view_engine import DerivedViewEngine
from ledgerview.sources.json_snapshot import JSONSnapshotSource


@pytest.fixture
def engine():
    """Create a DerivedViewEngine."""
    return DerivedViewEngine()


@pytest.fixture
def account_types():
    """Account types as returned by /accounting/account-types."""
    return [
        {"id": 1, "code": "ASSETS", "name": "Assets", "category": "asset",
         "normal_balance": "debit", "display_order": 1, "color": "success"},
        {"id": 2, "code": "LIABILITIES", "name": "Liabilities", "category": "liability",
         "normal_balance": "credit", "display_order": 2, "color": "warning"},
        {"id": 3, "code": "EQUITY", "name": "Equity", "category": "equity",
         "normal_balance": "credit", "display_order": 3, "color": "info"},
        {"id": 4, "code": "REVENUE", "name": "Revenue", "category": "revenue",
         "normal_balance": "credit", "display_order": 4, "color": "primary"},
        {"id": 5, "code": "OPERATING_EXPENSES", "name": "Operating Expenses", "category": "expense",
         "normal_balance": "debit", "display_order": 6, "color": "danger"},
    ]


@pytest.fixture
def accounts():
    """Chart of accounts mixing linked and legacy denormalized type fields."""
    return [
        {"id": 10, "account_code": "4000", "account_name": "Service Revenue",
         "account_type_id": 4, "normal_balance": "CR", "balance": "1500.00", "is_active": True},
        {"id": 11, "account_code": "1000", "account_name": "Cash on Hand",
         "account_type_id": 1, "normal_balance": "DR", "balance": "2500.50", "is_active": True},
        {"id": 12, "account_code": "2000", "account_name": "Accounts Payable",
         "account_type": "LIABILITIES", "normal_balance": "CR", "balance": 800, "is_active": True},
        {"id": 13, "account_code": "1010", "account_name": "Cash in Bank",
         "account_type_id": 1, "normal_balance": "DR", "balance": None, "is_active": True},
        {"id": 14, "account_code": "9999", "account_name": "Orphaned Account",
         "account_type_id": 99, "normal_balance": "DR", "balance": "10", "is_active": False},
        {"id": 15, "account_code": "5000", "account_name": "Rent Expense",
         "account_type": "OPERATING_EXPENSES", "normal_balance": "DR", "balance": "abc"},
    ]


@pytest.fixture
def personnel():
    """Personnel records in fetch order."""
    return [
        {"id": 1, "username": "jdelacruz", "first_name": "Juan", "last_name": "Dela Cruz",
         "phone": "09171234567", "is_active": True, "created_at": "2024-01-10T08:00:00Z"},
        {"id": 2, "username": "msantos", "first_name": "Maria", "last_name": "Santos",
         "phone": "09181112222", "is_active": False, "created_at": "2024-03-05T09:30:00Z"},
        {"id": 3, "username": "legacy", "name": "Pedro Reyes",
         "phone": None, "created_at": None},
        {"id": 4, "username": "agarcia", "first_name": "Ana", "last_name": "Garcia",
         "phone": "09990001111", "is_active": True, "created_at": "2024-02-20T10:15:00Z"},
    ]


@pytest.fixture
def activity_logs():
    """Activity log entries, newest first."""
    return [
        {"id": 6, "user_id": 2, "user_name": "Maria Santos", "user_type": "personnel",
         "action": "deleted", "subject_type": "App\\Models\\Invoice", "subject_id": 40,
         "created_at": "2024-03-02T16:00:00Z", "ip_address": "10.0.0.2"},
        {"id": 5, "user_id": 1, "user_name": "System Administrator", "user_type": "personnel",
         "action": "updated", "subject_type": "client", "subject_id": 3,
         "created_at": "2024-03-01T12:00:00Z", "ip_address": "10.0.0.9"},
        {"id": 4, "user_id": 9, "user_name": "Admin", "user_type": "admin",
         "action": "created", "subject_type": "App\\Models\\JournalEntry", "subject_id": 8,
         "created_at": "2024-02-15T12:00:00Z", "ip_address": "10.0.0.9"},
        {"id": 3, "user_id": 1, "user_name": "Juan Dela Cruz", "user_type": "personnel",
         "action": "created", "subject_type": "App\\Models\\JournalEntry", "subject_id": 7,
         "created_at": "2024-02-01T00:30:00Z", "ip_address": "10.0.0.1"},
        {"id": 2, "user_id": 1, "user_name": "Juan Dela Cruz", "user_type": "personnel",
         "action": "login", "subject_type": None, "subject_id": None,
         "created_at": "2024-01-31T23:59:00Z", "ip_address": "10.0.0.1"},
        {"id": 1, "user_id": "2", "user_name": "Maria Santos", "user_type": "personnel",
         "action": "created", "subject_type": "supplier", "subject_id": 5,
         "created_at": "2024-01-05T08:00:00Z", "ip_address": "10.0.0.2"},
    ]


@pytest.fixture
def invoices():
    return [
        {"id": 1, "invoice_date": "2024-03-03", "due_date": "2024-03-10", "status": "unpaid",
         "total_amount": "1000.00", "income_account_id": 10,
         "income_account": {"account_name": "Service Revenue"},
         "client_id": 1, "client": {"name": "Acme Corp"}, "created_at": "2024-03-03T09:00:00Z"},
        {"id": 2, "invoice_date": "2024-03-15", "due_date": "2024-04-15", "status": "paid",
         "total_amount": "2500.00", "income_account_id": 10,
         "income_account": {"account_name": "Service Revenue"},
         "client_id": 2, "client": {"name": "Globex"}, "created_at": "2024-03-15T09:00:00Z"},
        {"id": 3, "invoice_date": "2024-02-20", "status": "unpaid", "total_amount": "400",
         "client_id": None, "created_at": "2024-02-20T09:00:00Z"},
    ]


@pytest.fixture
def bills():
    return [
        {"id": 1, "bill_date": "2024-03-05", "due_date": "2024-03-20", "status": "unpaid",
         "total_amount": "300.00", "expense_account_id": 15,
         "expense_account": {"account_name": "Rent Expense"},
         "supplier_id": 7, "supplier": {"name": "Landlord Inc"}, "created_at": "2024-03-05T10:00:00Z"},
        {"id": 2, "bill_date": "2024-01-10", "status": "paid", "total_amount": "150.00",
         "expense_account_id": 15, "expense_account": {"account_name": "Rent Expense"},
         "supplier_id": 7, "supplier": {"name": "Landlord Inc"}, "created_at": "2024-01-10T10:00:00Z"},
    ]


@pytest.fixture
def journals():
    return [
        {"id": 1, "entry_date": "2024-03-01", "total_debit": "500.00", "total_credit": "500.00",
         "created_at": "2024-03-01T08:00:00Z"},
        {"id": 2, "entry_date": "2024-03-02", "total_debit": "200.00", "total_credit": "150.00",
         "created_at": "2024-03-02T08:00:00Z"},
    ]


@pytest.fixture
def cash_accounts():
    return [
        {"id": 1, "account_name": "Petty Cash", "balance": "5000.00"},
        {"id": 2, "account_name": "BDO Checking", "current_balance": "250000.00", "balance": "240000.00"},
    ]


@pytest.fixture
def snapshot_dir(
    tmp_path, account_types, accounts, personnel, activity_logs, invoices, bills, journals, cash_accounts
):
    """Write every fixture collection as a JSON snapshot, in varied envelopes."""
    payloads = {
        "account_types": account_types,
        "accounts": {"accounts": accounts},
        "personnel": {"data": personnel},
        "activity_logs": {"data": activity_logs, "last_page": 1},
        "invoices": {"data": invoices},
        "bills": bills,
        "journals": {"data": journals},
        "cash_accounts": cash_accounts,
    }
    for name, payload in payloads.items():
        (tmp_path / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")
    return tmp_path


@pytest.fixture
def snapshot_source(snapshot_dir):
    """Create a JSONSnapshotSource over the fixture snapshots."""
    return JSONSnapshotSource(snapshot_dir)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

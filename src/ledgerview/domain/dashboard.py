"""Dashboard aggregation domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ledgerview.domain.entities import (
    DashboardAlerts,
    DashboardOverview,
    DashboardView,
    MonthlyTotals,
    RankedTotal,
    Record,
    SortDirection,
    SortSpec,
)
from ledgerview.domain.predicates import build_filter, date_range, where
from ledgerview.domain.resolvers import by_field_or_default, by_month
from ledgerview.domain.view_engine import DerivedViewEngine, instant_key
from ledgerview.utils.amount_parser import ZERO, parse_amount, parse_number
from ledgerview.utils.date_parser import to_calendar_date

TOP_LIMIT = 5
RECENT_LIMIT = 5
LOW_CASH_THRESHOLD = Decimal("10000")
BALANCE_TOLERANCE = Decimal("0.01")
OTHER = "other"

DOCUMENT_DATE_FIELDS = ("invoice_date", "bill_date", "entry_date", "created_at")


def document_date(record: Record) -> Any:
    """First present of the document date fields."""
    for field in DOCUMENT_DATE_FIELDS:
        if record.get(field):
            return record[field]
    return None


def is_unpaid(record: Record) -> bool:
    return record.get("status") != "paid"


def cash_balance(account: Record) -> Any:
    """Cash accounts report ``current_balance``, older payloads ``balance``."""
    return account.get("current_balance") or account.get("balance")


class DashboardService:
    """Builds the back-office dashboard from fetched collections."""

    def __init__(self, engine: Optional[DerivedViewEngine] = None):
        self.engine = engine or DerivedViewEngine()

    def filter_by_date(
        self,
        records: Sequence[Record],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> list[Record]:
        """Keep records whose document date falls in the inclusive range."""
        if start_date is None and end_date is None:
            return list(records)
        return self.engine.filter(
            records, build_filter(date_range(document_date, start_date, end_date))
        )

    def total(self, records: Sequence[Record], field: Any = "total_amount") -> Decimal:
        return self.engine.aggregate(records, field).sum

    def monthly_totals(
        self, invoices: Sequence[Record], bills: Sequence[Record]
    ) -> tuple[MonthlyTotals, ...]:
        """Income and expenses per ``YYYY-MM``, oldest month first."""
        income = self.engine.aggregate_groups(
            self.engine.group(invoices, by_month("invoice_date", "created_at")),
            "total_amount",
        )
        expenses = self.engine.aggregate_groups(
            self.engine.group(bills, by_month("bill_date", "created_at")),
            "total_amount",
        )
        months = sorted(set(income) | set(expenses))
        return tuple(
            MonthlyTotals(
                month=month,
                income=income[month].sum if month in income else ZERO,
                expenses=expenses[month].sum if month in expenses else ZERO,
            )
            for month in months
        )

    def top_totals(
        self,
        records: Sequence[Record],
        id_field: str,
        related_field: str,
        name_field: str,
        default_name: str = "Other",
        limit: int = TOP_LIMIT,
    ) -> tuple[RankedTotal, ...]:
        """Rank groups of records by summed ``total_amount``.

        Records without ``id_field`` share the "other" bucket. A group's name
        comes from the related object embedded in its first record.
        """
        groups = self.engine.group(records, by_field_or_default(id_field, OTHER))
        aggregates = self.engine.aggregate_groups(groups, "total_amount")

        ranked = []
        for key, aggregate in self.engine.top_groups(aggregates, limit):
            related = groups[key][0].get(related_field) or {}
            name = related.get(name_field) if isinstance(related, Mapping) else None
            ranked.append(RankedTotal(key=key, name=name or default_name, total=aggregate.sum))
        return tuple(ranked)

    def most_recent(self, records: Sequence[Record], limit: int = RECENT_LIMIT) -> tuple[Record, ...]:
        ordered = self.engine.sort(
            records, SortSpec(key=instant_key("created_at"), direction=SortDirection.DESC)
        )
        return self.engine.paginate(ordered, 1, limit).items

    def build_alerts(
        self,
        invoices: Sequence[Record],
        bills: Sequence[Record],
        journals: Sequence[Record],
        cash_accounts: Sequence[Record],
        today: date,
    ) -> DashboardAlerts:
        """Collect records needing attention.

        Overdue documents are unpaid and due (falling back to the document
        date) before ``today``. Low-cash accounts have a readable balance
        below the threshold. Unbalanced journals differ by more than a cent.
        """

        def overdue(due_field: str, date_field: str):
            def test(record: Record) -> bool:
                if not is_unpaid(record):
                    return False
                due = to_calendar_date(record.get(due_field) or record.get(date_field))
                return due is not None and due < today

            return where(test, description=f"{due_field} before {today}")

        def low_cash(account: Record) -> bool:
            balance = account.get("balance")
            if balance is None or isinstance(balance, bool):
                return False
            try:
                return parse_amount(str(balance)) < LOW_CASH_THRESHOLD
            except ValueError:
                return False

        def unbalanced(entry: Record) -> bool:
            debit = parse_number(entry.get("total_debit"))
            credit = parse_number(entry.get("total_credit"))
            return abs(debit - credit) > BALANCE_TOLERANCE

        return DashboardAlerts(
            overdue_invoices=tuple(
                self.engine.filter(invoices, build_filter(overdue("due_date", "invoice_date")))
            ),
            overdue_bills=tuple(
                self.engine.filter(bills, build_filter(overdue("due_date", "bill_date")))
            ),
            low_cash_accounts=tuple(self.engine.filter(cash_accounts, build_filter(where(low_cash)))),
            unbalanced_entries=tuple(self.engine.filter(journals, build_filter(where(unbalanced)))),
        )

    def build_view(
        self,
        invoices: Sequence[Record] = (),
        bills: Sequence[Record] = (),
        journals: Sequence[Record] = (),
        cash_accounts: Sequence[Record] = (),
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> DashboardView:
        """Build the dashboard.

        Income, expenses, the monthly series and the top lists cover the
        date range; receivables, payables, cash, recent items and alerts
        cover everything fetched.

        Args:
            invoices: Invoice records (``total_amount``, ``invoice_date``, ``status``)
            bills: Bill records (``total_amount``, ``bill_date``, ``status``)
            journals: Journal entry records
            cash_accounts: Cash/bank account records
            start_date: First day of the reporting range
            end_date: Last day of the reporting range
            today: Reference day for overdue checks, defaults to today

        Returns:
            DashboardView
        """
        today = today or date.today()
        period_invoices = self.filter_by_date(invoices, start_date, end_date)
        period_bills = self.filter_by_date(bills, start_date, end_date)

        total_income = self.total(period_invoices)
        total_expenses = self.total(period_bills)
        overview = DashboardOverview(
            total_income=total_income,
            total_expenses=total_expenses,
            net_income=total_income - total_expenses,
            cash_balance=self.total(cash_accounts, cash_balance),
            accounts_receivable=self.total(
                self.engine.filter(invoices, build_filter(where(is_unpaid)))
            ),
            accounts_payable=self.total(
                self.engine.filter(bills, build_filter(where(is_unpaid)))
            ),
            total_journal_entries=len(journals),
        )

        return DashboardView(
            start_date=start_date,
            end_date=end_date,
            overview=overview,
            monthly=self.monthly_totals(period_invoices, period_bills),
            top_income_accounts=self.top_totals(
                period_invoices, "income_account_id", "income_account", "account_name"
            ),
            top_expense_accounts=self.top_totals(
                period_bills, "expense_account_id", "expense_account", "account_name"
            ),
            top_clients=self.top_totals(period_invoices, "client_id", "client", "name"),
            top_suppliers=self.top_totals(period_bills, "supplier_id", "supplier", "name"),
            recent_journals=self.most_recent(journals),
            recent_invoices=self.most_recent(invoices),
            recent_bills=self.most_recent(bills),
            alerts=self.build_alerts(invoices, bills, journals, cash_accounts, today),
        )

"""Domain model entities for ledgerview.

Records themselves stay plain mappings, exactly as the REST API returns them.
The classes here describe the view parameters and the view models the engine
produces, plus the enumerations used to interpret records.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

Record = Mapping[str, Any]
GroupKey = Any
GroupKeyResolver = Callable[[Record], Optional[GroupKey]]


class ActivityAction(str, Enum):
    """Actions recorded in the activity log."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    DEACTIVATED = "deactivated"
    LOGIN = "login"
    LOGOUT = "logout"


class SortDirection(str, Enum):
    """Sort direction for list views."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Predicate:
    """Single (field, test) pair in a filter spec.

    ``test`` receives the raw field value (``None`` when missing) and the
    whole record, so predicates over derived values can still be expressed.
    """

    field: Optional[str]
    test: Callable[[Any, Record], bool]
    description: str = ""

    def __call__(self, record: Record) -> bool:
        value = record.get(self.field) if self.field is not None else None
        return self.test(value, record)


@dataclass(frozen=True)
class FilterSpec:
    """Ordered set of predicates combined with logical AND."""

    predicates: tuple[Predicate, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def and_(self, *predicates: Predicate) -> "FilterSpec":
        """Return a new spec with extra predicates appended."""
        return FilterSpec(predicates=self.predicates + tuple(predicates))

    def matches(self, record: Record) -> bool:
        return all(predicate(record) for predicate in self.predicates)


@dataclass(frozen=True)
class SortSpec:
    """Key extractor plus direction.

    ``key`` may be a field name or a callable taking a record.
    """

    key: Union[str, Callable[[Record], Any]]
    direction: SortDirection = SortDirection.ASC

    def extract(self, record: Record) -> Any:
        if callable(self.key):
            return self.key(record)
        return record.get(self.key)


@dataclass(frozen=True)
class Aggregate:
    """Numeric reduction over a group."""

    sum: Decimal = Decimal("0")
    count: int = 0


@dataclass(frozen=True)
class Page:
    """Bounded slice of an ordered sequence plus its position metadata."""

    items: tuple[Record, ...]
    index: int
    size: int
    total_count: int = 0
    total_pages: int = 1

    @property
    def has_previous(self) -> bool:
        return self.index > 1

    @property
    def has_next(self) -> bool:
        return self.index < self.total_pages

    @property
    def start_position(self) -> int:
        """1-based position of the first item, 0 for an empty page."""
        if not self.items:
            return 0
        return (self.index - 1) * self.size + 1

    @property
    def end_position(self) -> int:
        """1-based position of the last item, 0 for an empty page."""
        if not self.items:
            return 0
        return self.start_position + len(self.items) - 1


@dataclass(frozen=True)
class ViewModel:
    """Everything a list/report screen renders for one recompute."""

    page: Page
    groups: dict[GroupKey, tuple[Record, ...]] = field(default_factory=dict)
    aggregates: dict[GroupKey, Aggregate] = field(default_factory=dict)
    filtered_count: int = 0
    grouped_count: int = 0
    # Filtered records excluded from every group; 0 when no grouping ran.
    dropped_count: int = 0


@dataclass(frozen=True)
class AccountGroup:
    """Chart-of-accounts section for one account type."""

    type_code: str
    label: str
    accounts: tuple[Record, ...]
    total: Decimal
    count: int
    display_order: Optional[int] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class ChartOfAccountsView:
    """Grouped chart of accounts."""

    groups: tuple[AccountGroup, ...]
    filtered_count: int
    dropped_count: int

    @property
    def grand_total(self) -> Decimal:
        return sum((group.total for group in self.groups), Decimal("0"))


@dataclass(frozen=True)
class PersonnelView:
    """Personnel list page plus summary counters."""

    page: Page
    total_count: int
    active_count: int
    filtered_count: int
    has_active_filters: bool


@dataclass(frozen=True)
class ActivityLogView:
    """Activity log page plus summary counters."""

    page: Page
    filtered_count: int
    has_active_filters: bool


@dataclass(frozen=True)
class RankedTotal:
    """Named total used for dashboard top-N lists."""

    key: Any
    name: str
    total: Decimal


@dataclass(frozen=True)
class MonthlyTotals:
    """Income and expenses for one ``YYYY-MM`` month."""

    month: str
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class DashboardOverview:
    """Headline figures of the dashboard."""

    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    cash_balance: Decimal
    accounts_receivable: Decimal
    accounts_payable: Decimal
    total_journal_entries: int


@dataclass(frozen=True)
class DashboardAlerts:
    """Records that need operator attention."""

    overdue_invoices: tuple[Record, ...]
    overdue_bills: tuple[Record, ...]
    low_cash_accounts: tuple[Record, ...]
    unbalanced_entries: tuple[Record, ...]


@dataclass(frozen=True)
class DashboardView:
    """Complete dashboard model."""

    start_date: Optional[date]
    end_date: Optional[date]
    overview: DashboardOverview
    monthly: tuple[MonthlyTotals, ...]
    top_income_accounts: tuple[RankedTotal, ...]
    top_expense_accounts: tuple[RankedTotal, ...]
    top_clients: tuple[RankedTotal, ...]
    top_suppliers: tuple[RankedTotal, ...]
    recent_journals: tuple[Record, ...]
    recent_invoices: tuple[Record, ...]
    recent_bills: tuple[Record, ...]
    alerts: DashboardAlerts

"""Chart of accounts domain service."""

import logging
from typing import Any, Optional, Sequence

from ledgerview.domain.entities import (
    AccountGroup,
    ChartOfAccountsView,
    GroupKeyResolver,
    Record,
)
from ledgerview.domain.predicates import any_contains, build_filter, where
from ledgerview.domain.resolvers import by_foreign_key, index_by
from ledgerview.domain.view_engine import DerivedViewEngine

logger = logging.getLogger(__name__)

ALL_TYPES = "all"

# Labels for the legacy denormalized ``account_type`` codes.
DEFAULT_TYPE_LABELS = {
    "ASSETS": "Assets",
    "LIABILITIES": "Liabilities",
    "EQUITY": "Equity",
    "REVENUE": "Revenue",
    "COST_OF_SERVICES": "Cost of Services",
    "OPERATING_EXPENSES": "Operating Expenses",
}


class ChartOfAccountsService:
    """Builds the grouped chart-of-accounts view."""

    def __init__(self, account_types: Sequence[Record] = (), engine: Optional[DerivedViewEngine] = None):
        """Initialize chart of accounts service.

        Args:
            account_types: Account type records (id, code, name, display_order, color)
            engine: View engine, a fresh one by default
        """
        self.engine = engine or DerivedViewEngine()
        self.account_types = list(account_types)
        self.types_by_id = index_by(self.account_types, "id")
        self.types_by_code = index_by(self.account_types, "code")

    def type_resolver(self) -> GroupKeyResolver:
        """Resolve an account's effective type code.

        ``account_type_id`` is looked up among the fetched account types;
        the denormalized ``account_type`` field is the fallback.
        """
        return by_foreign_key(
            "account_type_id",
            self.types_by_id,
            key_field="code",
            fallback_field="account_type",
        )

    def type_label(self, type_code: str) -> str:
        account_type = self.types_by_code.get(type_code)
        if account_type is not None and account_type.get("name"):
            return account_type["name"]
        return DEFAULT_TYPE_LABELS.get(type_code, type_code)

    def filter_accounts(
        self,
        accounts: Sequence[Record],
        type_code: str = ALL_TYPES,
        search: Optional[str] = None,
    ) -> list[Record]:
        """Filter accounts by effective type and code/name search.

        Args:
            accounts: Ledger account records
            type_code: Account type code, or "all" for every type
            search: Case-insensitive text matched against code and name

        Returns:
            Matching accounts in input order
        """
        resolve = self.type_resolver()
        type_predicate = None
        if type_code and type_code != ALL_TYPES:
            type_predicate = where(
                lambda record: resolve(record) == type_code,
                description=f"type == {type_code!r}",
            )

        search_predicate = None
        if search and search.strip():
            search_predicate = any_contains(("account_code", "account_name"), search.strip())

        return self.engine.filter(accounts, build_filter(type_predicate, search_predicate))

    def group_accounts(self, accounts: Sequence[Record]) -> dict[Any, tuple[Record, ...]]:
        """Group accounts by effective type code in first-seen order."""
        return self.engine.group(accounts, self.type_resolver())

    def order_type_codes(self, type_codes: Sequence[str]) -> list[str]:
        """Order type codes by the account types' ``display_order``.

        Codes without a display order keep their relative order after the
        ordered ones. Codes are never compared as numbers.
        """
        def sort_key(indexed: tuple[int, str]) -> tuple[int, int, int]:
            position, code = indexed
            order = self.types_by_code.get(code, {}).get("display_order")
            if isinstance(order, bool) or not isinstance(order, int):
                try:
                    order = int(order)
                except (TypeError, ValueError):
                    return (1, 0, position)
            return (0, order, position)

        return [code for _, code in sorted(enumerate(type_codes), key=sort_key)]

    def build_view(
        self,
        accounts: Sequence[Record],
        type_code: str = ALL_TYPES,
        search: Optional[str] = None,
    ) -> ChartOfAccountsView:
        """Build the grouped chart of accounts.

        Args:
            accounts: Ledger account records
            type_code: Account type code filter, "all" for none
            search: Code/name search text

        Returns:
            ChartOfAccountsView with one group per account type
        """
        filtered = self.filter_accounts(accounts, type_code=type_code, search=search)
        grouped = self.group_accounts(filtered)
        aggregates = self.engine.aggregate_groups(grouped, "balance")

        dropped = len(filtered) - sum(len(members) for members in grouped.values())
        if dropped:
            logger.info("%d account(s) have no resolvable account type", dropped)

        groups = []
        for code in self.order_type_codes(list(grouped)):
            account_type = self.types_by_code.get(code, {})
            aggregate = aggregates[code]
            groups.append(
                AccountGroup(
                    type_code=code,
                    label=self.type_label(code),
                    accounts=grouped[code],
                    total=aggregate.sum,
                    count=aggregate.count,
                    display_order=account_type.get("display_order"),
                    color=account_type.get("color"),
                )
            )

        return ChartOfAccountsView(
            groups=tuple(groups),
            filtered_count=len(filtered),
            dropped_count=dropped,
        )

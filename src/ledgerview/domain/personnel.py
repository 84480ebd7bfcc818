"""Personnel list domain service."""

from datetime import datetime
from typing import Any, Optional, Sequence

from ledgerview.domain.entities import (
    PersonnelView,
    Predicate,
    Record,
    SortDirection,
    SortSpec,
)
from ledgerview.domain.errors import ValidationError, unknown_status_filter
from ledgerview.domain.predicates import any_contains, build_filter, where
from ledgerview.domain.view_engine import DerivedViewEngine, instant_key

STATUS_ALL = "all"
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUSES = (STATUS_ALL, STATUS_ACTIVE, STATUS_INACTIVE)

DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT_FIELD = "created_at"
DATE_SORT_FIELDS = ("created_at", "updated_at")
EPOCH = datetime(1970, 1, 1)


def full_name(person: Record) -> str:
    """Return "First Last" when both parts exist, else the legacy ``name``."""
    first = person.get("first_name")
    last = person.get("last_name")
    if first and last:
        return f"{first} {last}"
    return person.get("name") or ""


def is_active(person: Record) -> bool:
    """Personnel count as active unless explicitly deactivated."""
    return person.get("is_active") is not False


class PersonnelService:
    """Builds the filtered, sorted and paginated personnel list."""

    def __init__(self, engine: Optional[DerivedViewEngine] = None):
        self.engine = engine or DerivedViewEngine()

    def status_predicate(self, status: str) -> Optional[Predicate]:
        """Return the predicate for a status filter, None for "all".

        Raises:
            ValidationError: If status is not one of all/active/inactive
        """
        status = (status or STATUS_ALL).strip().lower()
        if status == STATUS_ALL:
            return None
        if status == STATUS_ACTIVE:
            return where(is_active, description="active")
        if status == STATUS_INACTIVE:
            return where(lambda person: not is_active(person), description="inactive")
        raise ValidationError(unknown_status_filter(status))

    def search_predicate(self, search: Optional[str]) -> Optional[Predicate]:
        if not search or not search.strip():
            return None
        return any_contains((full_name, "username", "phone"), search)

    def sort_spec(self, field: Optional[str], direction: SortDirection) -> Optional[SortSpec]:
        """Sort spec for a column; dates sort by instant with missing as epoch."""
        if not field:
            return None
        if field in DATE_SORT_FIELDS:
            return SortSpec(key=instant_key(field, default=EPOCH), direction=direction)
        if field == "name":
            return SortSpec(key=full_name, direction=direction)
        return SortSpec(key=lambda person: _text_or_empty(person.get(field)), direction=direction)

    def build_view(
        self,
        personnel: Sequence[Record],
        search: Optional[str] = None,
        status: str = STATUS_ALL,
        sort_field: Optional[str] = DEFAULT_SORT_FIELD,
        sort_direction: SortDirection = SortDirection.DESC,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> PersonnelView:
        """Build one page of the personnel list.

        Args:
            personnel: Personnel records
            search: Text matched against full name, username and phone
            status: "all", "active" or "inactive"
            sort_field: Column to sort by, None to keep fetch order
            sort_direction: Sort direction
            page: Requested page, clamped to the valid range
            page_size: Rows per page

        Returns:
            PersonnelView with the page and summary counters

        Raises:
            ValidationError: If status is unknown
            InvalidArgumentError: If page_size is not positive
        """
        filter_spec = build_filter(
            self.search_predicate(search),
            self.status_predicate(status),
        )
        view = self.engine.build_view(
            personnel,
            filter_spec=filter_spec,
            sort_spec=self.sort_spec(sort_field, sort_direction),
            page=page,
            page_size=page_size,
        )
        return PersonnelView(
            page=view.page,
            total_count=len(personnel),
            active_count=sum(1 for person in personnel if is_active(person)),
            filtered_count=view.filtered_count,
            has_active_filters=bool(filter_spec),
        )


def _text_or_empty(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value)

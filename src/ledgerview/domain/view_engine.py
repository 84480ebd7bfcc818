"""Derived view engine.

Turns a raw record collection plus view parameters into what a list or
report screen renders: filter, group, aggregate, sort, paginate. Every
operation is pure and synchronous; inputs are never mutated and each call
returns fresh structures.
"""

import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ledgerview.domain.entities import (
    Aggregate,
    FilterSpec,
    GroupKey,
    GroupKeyResolver,
    Page,
    Record,
    SortDirection,
    SortSpec,
    ViewModel,
)
from ledgerview.domain.errors import InvalidArgumentError, invalid_page, invalid_page_size
from ledgerview.domain.predicates import FieldSource
from ledgerview.utils.amount_parser import ZERO, parse_number
from ledgerview.utils.date_parser import parse_instant

logger = logging.getLogger(__name__)

_MISSING_RANK = 0
_NUMBER_RANK = 1
_INSTANT_RANK = 2
_TEXT_RANK = 3


def comparable_key(value: Any) -> tuple[int, Any]:
    """Map a sort key to a totally ordered tuple.

    Missing values sort first, then numbers (numerically), then dates and
    datetimes (by instant), then text (case-insensitively). Values of any
    other type compare by their text form.
    """
    if value is None:
        return (_MISSING_RANK, 0)
    if isinstance(value, bool):
        return (_NUMBER_RANK, Decimal(int(value)))
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        if not number.is_finite():
            return (_MISSING_RANK, 0)
        return (_NUMBER_RANK, number)
    if isinstance(value, (date, datetime)):
        instant = parse_instant(value)
        if instant is None:
            return (_MISSING_RANK, 0)
        return (_INSTANT_RANK, instant)
    return (_TEXT_RANK, str(value).lower())


def instant_key(field: str, default: Optional[datetime] = None) -> Callable[[Record], Any]:
    """Sort key reading a timestamp field as an instant."""

    def key(record: Record) -> Optional[datetime]:
        instant = parse_instant(record.get(field))
        return instant if instant is not None else default

    return key


def numeric_key(field: str) -> Callable[[Record], Decimal]:
    """Sort key reading a field as a number, missing or dirty values as zero."""

    def key(record: Record) -> Decimal:
        return parse_number(record.get(field))

    return key


def page_numbers(current: int, total_pages: int, max_visible: int = 5) -> list[Optional[int]]:
    """Page buttons to show in a pager, ``None`` marking an ellipsis.

    Up to ``max_visible`` pages are listed outright; beyond that the first and
    last pages are always shown around a window centred on ``current``.

    >>> page_numbers(5, 10)
    [1, None, 4, 5, 6, None, 10]
    """
    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))

    start = max(2, current - 1)
    end = min(total_pages - 1, current + 1)
    if current <= 2:
        end = max_visible - 1
    elif current >= total_pages - 1:
        start = total_pages - (max_visible - 2)

    numbers: list[Optional[int]] = [1]
    if start > 2:
        numbers.append(None)
    numbers.extend(range(start, end + 1))
    if end < total_pages - 1:
        numbers.append(None)
    numbers.append(total_pages)
    return numbers


class DerivedViewEngine:
    """Pure pipeline from raw records to a renderable view model."""

    def filter(self, records: Sequence[Record], filter_spec: Optional[FilterSpec]) -> list[Record]:
        """Return the records that pass every predicate, in input order.

        Args:
            records: Raw records
            filter_spec: Predicates combined with AND; empty or None is identity

        Returns:
            New list holding the matching records
        """
        if not filter_spec:
            return list(records)
        return [record for record in records if filter_spec.matches(record)]

    def group(
        self, records: Iterable[Record], resolver: GroupKeyResolver
    ) -> dict[GroupKey, tuple[Record, ...]]:
        """Partition records by resolved key.

        Groups appear in order of first-seen key and keep record order.
        Records whose key resolves to ``None`` are left out of every group.

        Args:
            records: Records to partition
            resolver: Function mapping a record to a hashable key or None

        Returns:
            Mapping of group key to the group's records
        """
        buckets: dict[GroupKey, list[Record]] = {}
        dropped = 0
        for record in records:
            key = resolver(record)
            if key is None:
                dropped += 1
                continue
            buckets.setdefault(key, []).append(record)

        if dropped:
            logger.debug("Dropped %d record(s) with unresolvable group key", dropped)

        return {key: tuple(members) for key, members in buckets.items()}

    def aggregate(self, records: Iterable[Record], field: FieldSource) -> Aggregate:
        """Sum a numeric field and count the records.

        Missing and unparsable values add zero, so the result is always a
        finite Decimal. ``field`` may also be a callable reading a derived
        value from the record.
        """
        total = ZERO
        count = 0
        for record in records:
            value = field(record) if callable(field) else record.get(field)
            total += parse_number(value)
            count += 1
        return Aggregate(sum=total, count=count)

    def aggregate_groups(
        self, groups: Mapping[GroupKey, Sequence[Record]], field: FieldSource
    ) -> dict[GroupKey, Aggregate]:
        """Aggregate every group, keeping the grouping's key order."""
        return {key: self.aggregate(members, field) for key, members in groups.items()}

    def top_groups(
        self, aggregates: Mapping[GroupKey, Aggregate], limit: int
    ) -> list[tuple[GroupKey, Aggregate]]:
        """Return up to ``limit`` groups with the largest sums, ties in key order."""
        ranked = sorted(aggregates.items(), key=lambda item: item[1].sum, reverse=True)
        return ranked[: max(limit, 0)]

    def sort(self, records: Sequence[Record], sort_spec: Optional[SortSpec]) -> list[Record]:
        """Stable sort by the spec's key.

        Equal keys keep their input order in both directions.
        """
        if sort_spec is None:
            return list(records)
        return sorted(
            records,
            key=lambda record: comparable_key(sort_spec.extract(record)),
            reverse=sort_spec.direction == SortDirection.DESC,
        )

    def paginate(self, records: Sequence[Record], page: int, page_size: int) -> Page:
        """Slice one page out of ``records``.

        ``page`` is clamped to ``[1, total_pages]``; page 1 always exists,
        possibly empty.

        Args:
            records: Ordered records
            page: Requested 1-based page number
            page_size: Records per page

        Returns:
            Page with items and position metadata

        Raises:
            InvalidArgumentError: If page_size is not a positive integer or
                page is not an integer
        """
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise InvalidArgumentError(invalid_page_size(page_size))
        if isinstance(page, bool) or not isinstance(page, int):
            raise InvalidArgumentError(invalid_page(page))

        total_count = len(records)
        total_pages = max(1, math.ceil(total_count / page_size))
        index = min(max(page, 1), total_pages)
        if index != page:
            logger.debug("Clamped page %s to %d of %d", page, index, total_pages)

        start = (index - 1) * page_size
        return Page(
            items=tuple(records[start : start + page_size]),
            index=index,
            size=page_size,
            total_count=total_count,
            total_pages=total_pages,
        )

    def build_view(
        self,
        records: Sequence[Record],
        filter_spec: Optional[FilterSpec] = None,
        resolver: Optional[GroupKeyResolver] = None,
        aggregate_field: Optional[FieldSource] = None,
        sort_spec: Optional[SortSpec] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> ViewModel:
        """Run the whole pipeline.

        Groups are built from the filtered records in input order; the page is
        cut from the filtered records after sorting. Aggregates are computed
        per group when both a resolver and an aggregate field are given.

        Raises:
            InvalidArgumentError: If page_size is not a positive integer
        """
        filtered = self.filter(records, filter_spec)

        groups: dict[GroupKey, tuple[Record, ...]] = {}
        aggregates = {}
        grouped_count = 0
        dropped_count = 0
        if resolver is not None:
            groups = self.group(filtered, resolver)
            grouped_count = sum(len(members) for members in groups.values())
            dropped_count = len(filtered) - grouped_count
            if aggregate_field is not None:
                aggregates = self.aggregate_groups(groups, aggregate_field)

        ordered = self.sort(filtered, sort_spec)
        return ViewModel(
            page=self.paginate(ordered, page, page_size),
            groups=groups,
            aggregates=aggregates,
            filtered_count=len(filtered),
            grouped_count=grouped_count,
            dropped_count=dropped_count,
        )

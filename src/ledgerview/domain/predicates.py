"""Filter predicate constructors.

Each constructor returns a :class:`Predicate`; a missing field is read as
``None`` and treated as an empty string wherever text is compared.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence, Union

from ledgerview.domain.entities import FilterSpec, Predicate, Record
from ledgerview.utils.date_parser import is_calendar_day, parse_instant

logger = logging.getLogger(__name__)

FieldSource = Union[str, Callable[[Record], Any]]
DateBound = Union[date, datetime, str, None]


def as_text(value: Any) -> str:
    """Render a field value for case-insensitive text matching."""
    if value is None:
        return ""
    return str(value).lower()


def contains(field: str, query: Any) -> Predicate:
    """Case-insensitive substring match on one field."""
    needle = as_text(query)

    def test(value: Any, record: Record) -> bool:
        return needle in as_text(value)

    return Predicate(field=field, test=test, description=f"{field} contains {needle!r}")


def any_contains(sources: Sequence[FieldSource], query: Any) -> Predicate:
    """Case-insensitive substring match against any of several values.

    Args:
        sources: Field names or callables deriving a value from the record
        query: Search text
    """
    needle = as_text(query)

    def read(source: FieldSource, record: Record) -> Any:
        return source(record) if callable(source) else record.get(source)

    def test(value: Any, record: Record) -> bool:
        return any(needle in as_text(read(source, record)) for source in sources)

    return Predicate(field=None, test=test, description=f"any contains {needle!r}")


def equals(field: str, expected: Any, as_string: bool = False) -> Predicate:
    """Exact equality on one field.

    A ``None`` or empty expectation matches only records whose field is
    missing, ``None`` or empty. With ``as_string`` both sides are compared
    by their string form, so ``7`` matches ``"7"``.
    """
    expects_empty = expected is None or expected == ""

    def test(value: Any, record: Record) -> bool:
        if expects_empty:
            return value is None or value == ""
        if value is None:
            return False
        if as_string:
            return str(value) == str(expected)
        return value == expected

    return Predicate(field=field, test=test, description=f"{field} == {expected!r}")


def _resolve_bound(bound: DateBound) -> tuple[bool, Optional[datetime], bool]:
    """Return (present, instant, whole_day) for a range bound.

    ``whole_day`` is set for calendar-date bounds, which compare against the
    record's calendar date rather than its exact instant.
    """
    if bound is None or bound == "":
        return False, None, False
    whole_day = isinstance(bound, date) and not isinstance(bound, datetime)
    if isinstance(bound, str):
        whole_day = is_calendar_day(bound.strip())
    return True, parse_instant(bound), whole_day


def date_range(field: FieldSource, start: DateBound = None, end: DateBound = None) -> Predicate:
    """Inclusive date-range membership.

    ``field`` is a field name or a callable deriving the timestamp from the
    record.

    Calendar-day bounds (``date`` objects, or strings without a time of day
    such as ``2024-01-15`` or ``January 15, 2024``) match any instant on that
    day. An inverted or unparsable range matches nothing.
    Records with a missing or unparsable timestamp never match a bounded
    range.
    """
    has_start, start_at, start_day = _resolve_bound(start)
    has_end, end_at, end_day = _resolve_bound(end)
    name = field if isinstance(field, str) else getattr(field, "__name__", "value")
    description = f"{name} in [{start}, {end}]"
    predicate_field = field if isinstance(field, str) else None

    if (has_start and start_at is None) or (has_end and end_at is None):
        logger.debug("Unparsable date bound in %s; range matches nothing", description)
        return Predicate(field=predicate_field, test=lambda value, record: False, description=description)

    if has_start and has_end:
        lower = start_at.date() if start_day else start_at
        upper = end_at.date() if end_day else end_at
        if start_day == end_day and lower > upper:
            logger.debug("Inverted range %s matches nothing", description)
            return Predicate(field=predicate_field, test=lambda value, record: False, description=description)

    def test(value: Any, record: Record) -> bool:
        if not has_start and not has_end:
            return True
        if callable(field):
            value = field(record)
        instant = parse_instant(value)
        if instant is None:
            return False
        if has_start:
            if start_day:
                if instant.date() < start_at.date():
                    return False
            elif instant < start_at:
                return False
        if has_end:
            if end_day:
                if instant.date() > end_at.date():
                    return False
            elif instant > end_at:
                return False
        return True

    return Predicate(field=predicate_field, test=test, description=description)


def where(test: Callable[[Record], bool], description: str = "") -> Predicate:
    """Wrap an arbitrary pure record predicate."""
    return Predicate(field=None, test=lambda value, record: test(record), description=description)


def build_filter(*predicates: Optional[Predicate]) -> FilterSpec:
    """Build a filter spec, skipping ``None`` placeholders for unset filters."""
    return FilterSpec(predicates=tuple(p for p in predicates if p is not None))

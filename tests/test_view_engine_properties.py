"""Property-based tests for the derived view engine."""

import math
from collections import Counter

from hypothesis import given, settings
from hypothesis import strategies as st

from ledgerview.domain.entities import SortDirection, SortSpec
from ledgerview.domain.predicates import build_filter, contains, date_range, equals
from ledgerview.domain.resolvers import by_field
from ledgerview.domain.view_engine import DerivedViewEngine, instant_key

engine = DerivedViewEngine()

field_values = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-10**6, max_value=10**6),
    st.floats(allow_nan=True, allow_infinity=True),
    st.text(max_size=8),
    st.sampled_from(
        [
            "2024-01-01",
            "2024-02-15T10:00:00Z",
            "0001-01-01T00:00:00+05:00",
            "9999-12-31T23:00:00-05:00",
            "not a date",
            "12.50",
            "(3.00)",
        ]
    ),
)


@st.composite
def record_lists(draw, max_size=40):
    """Lists of records with a unique ``_pos`` so duplicates stay distinguishable."""
    rows = draw(
        st.lists(
            st.fixed_dictionaries(
                {},
                optional={
                    "name": field_values,
                    "type": st.sampled_from([None, "", "asset", "liability", "equity"]),
                    "balance": field_values,
                    "created_at": field_values,
                    "k": st.integers(min_value=0, max_value=3),
                },
            ),
            max_size=max_size,
        )
    )
    return [dict(row, _pos=pos) for pos, row in enumerate(rows)]


filter_specs = st.builds(
    lambda name, type_, start, end: build_filter(
        contains("name", name) if name is not None else None,
        equals("type", type_) if type_ != "skip" else None,
        date_range("created_at", start, end) if start or end else None,
    ),
    st.one_of(st.none(), st.text(max_size=2)),
    st.sampled_from(["skip", None, "asset", "liability"]),
    st.sampled_from([None, "2024-01-01", "2024-02-01"]),
    st.sampled_from([None, "2024-01-31", "2024-03-01"]),
)


def _positions(records):
    return [record["_pos"] for record in records]


@given(record_lists(), filter_specs)
@settings(max_examples=200)
def test_filter_is_idempotent(records, spec):
    once = engine.filter(records, spec)

    assert _positions(engine.filter(once, spec)) == _positions(once)


@given(record_lists())
def test_empty_filter_is_identity(records):
    assert _positions(engine.filter(records, build_filter())) == _positions(records)


@given(record_lists(), filter_specs, filter_specs)
def test_filter_order_does_not_matter(records, first, second):
    forward = engine.filter(engine.filter(records, first), second)
    backward = engine.filter(engine.filter(records, second), first)

    assert _positions(forward) == _positions(backward)


@given(record_lists(), filter_specs)
def test_filter_preserves_order(records, spec):
    positions = _positions(engine.filter(records, spec))

    assert positions == sorted(positions)


@given(record_lists())
def test_grouping_partitions_resolvable_records(records):
    resolver = by_field("type")
    groups = engine.group(records, resolver)

    grouped = [record["_pos"] for members in groups.values() for record in members]
    expected = [record["_pos"] for record in records if resolver(record) is not None]

    assert Counter(grouped) == Counter(expected)
    assert len(grouped) == len(set(grouped))
    for key, members in groups.items():
        assert all(resolver(record) == key for record in members)


@given(record_lists(), st.integers(min_value=1, max_value=12))
def test_pages_cover_records_exactly(records, page_size):
    last_page = max(1, math.ceil(len(records) / page_size))

    collected = []
    for index in range(1, last_page + 1):
        page = engine.paginate(records, index, page_size)
        assert page.index == index
        assert len(page.items) <= page_size
        collected.extend(page.items)

    assert _positions(collected) == _positions(records)


@given(record_lists(), st.integers(min_value=-5, max_value=50), st.integers(min_value=1, max_value=12))
def test_page_is_always_in_valid_range(records, requested, page_size):
    page = engine.paginate(records, requested, page_size)

    assert 1 <= page.index <= page.total_pages
    assert page.total_pages == max(1, math.ceil(len(records) / page_size))


@given(record_lists(), st.sampled_from([SortDirection.ASC, SortDirection.DESC]))
def test_sort_is_stable(records, direction):
    result = engine.sort(records, SortSpec(key="k", direction=direction))

    for key in {record.get("k") for record in records}:
        before = [r["_pos"] for r in records if r.get("k") == key]
        after = [r["_pos"] for r in result if r.get("k") == key]
        assert before == after


@given(record_lists())
def test_aggregate_never_produces_nan(records):
    result = engine.aggregate(records, "balance")

    assert result.sum.is_finite()
    assert result.count == len(records)


@given(st.lists(st.fixed_dictionaries({"other": field_values}), max_size=20))
def test_aggregate_missing_field_is_zero(records):
    result = engine.aggregate(records, "balance")

    assert result.sum == 0


@given(record_lists(), st.sampled_from([SortDirection.ASC, SortDirection.DESC]))
def test_sort_by_instant_never_raises(records, direction):
    result = engine.sort(records, SortSpec(key=instant_key("created_at"), direction=direction))

    assert sorted(_positions(result)) == _positions(records)

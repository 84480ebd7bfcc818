"""Record source layer for ledgerview."""

from ledgerview.sources.base import RecordSource, InMemorySource
from ledgerview.sources.envelope import normalize_records, fetch_all_pages
from ledgerview.sources.factories import create_snapshot_source

__all__ = [
    "RecordSource",
    "InMemorySource",
    "normalize_records",
    "fetch_all_pages",
    "create_snapshot_source",
]

"""Response envelope normalization.

The back-office API answers list endpoints with a bare array, a
``{"data": [...]}`` envelope, a paginated ``{"data": [...], "last_page": n}``
envelope, or a resource-named key such as ``{"accounts": [...]}``. Everything
downstream works on a plain list of records.
"""

import logging
from typing import Any, Callable, Mapping, Sequence

from ledgerview.domain.entities import Record

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = ("data", "accounts", "personnel", "items", "results")


def normalize_records(payload: Any, keys: Sequence[str] = ENVELOPE_KEYS) -> list[Record]:
    """Flatten a response payload into a list of records.

    Args:
        payload: Decoded JSON response
        keys: Envelope keys to look under, in priority order

    Returns:
        List of mapping records; non-mapping entries are skipped
    """
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, Mapping):
        rows = None
        for key in keys:
            candidate = payload.get(key)
            if isinstance(candidate, list):
                rows = candidate
                break
            # Laravel-style paginator nested under "data"
            if isinstance(candidate, Mapping) and isinstance(candidate.get("data"), list):
                rows = candidate["data"]
                break
        if rows is None:
            logger.warning("Payload has no recognized envelope (keys: %s)", sorted(payload))
            return []
    else:
        if payload is not None:
            logger.warning("Unexpected payload type %s", type(payload).__name__)
        return []

    records = [row for row in rows if isinstance(row, Mapping)]
    skipped = len(rows) - len(records)
    if skipped:
        logger.warning("Skipped %d non-object row(s) in payload", skipped)
    return records


def last_page_of(payload: Any) -> int:
    """Return the ``last_page`` of a paginated envelope, 1 when absent."""
    if isinstance(payload, Mapping):
        for container in (payload, payload.get("meta")):
            if isinstance(container, Mapping) and container.get("last_page") is not None:
                try:
                    return max(int(container.get("last_page") or 1), 1)
                except (TypeError, ValueError):
                    return 1
    return 1


def fetch_all_pages(fetch_page: Callable[[int], Any], max_pages: int = 1000) -> list[Record]:
    """Fetch every page of a server-paginated collection.

    Calls ``fetch_page(1)``, ``fetch_page(2)``, ... until the envelope's
    ``last_page`` is reached, concatenating records in page order.

    Args:
        fetch_page: Callable returning the decoded payload for a page number
        max_pages: Safety stop for servers reporting an unbounded last page

    Returns:
        All records across pages
    """
    records: list[Record] = []
    page = 1
    last_page = 1
    while True:
        payload = fetch_page(page)
        records.extend(normalize_records(payload))
        last_page = last_page_of(payload)
        page += 1
        if page > last_page:
            break
        if page > max_pages:
            logger.warning("Stopped paging after %d pages (last_page=%d)", max_pages, last_page)
            break
    return records

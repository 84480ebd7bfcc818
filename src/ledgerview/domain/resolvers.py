"""Group key resolvers."""

from typing import Any, Iterable, Mapping, Optional

from ledgerview.domain.entities import GroupKeyResolver, Record
from ledgerview.utils.date_parser import parse_instant


def by_field(field: str) -> GroupKeyResolver:
    """Group by the raw value of a field; missing or empty values drop."""

    def resolve(record: Record) -> Optional[Any]:
        value = record.get(field)
        if value is None or value == "":
            return None
        return value

    return resolve


def by_field_or_default(field: str, default: Any) -> GroupKeyResolver:
    """Group by a field, bucketing missing values under ``default``."""

    def resolve(record: Record) -> Any:
        value = record.get(field)
        if value is None or value == "":
            return default
        return value

    return resolve


def by_foreign_key(
    id_field: str,
    lookup: Mapping[Any, Record],
    key_field: str,
    fallback_field: Optional[str] = None,
) -> GroupKeyResolver:
    """Group by an attribute of a related record.

    The related record is found by ``record[id_field]`` in ``lookup``; when
    there is no link, or the link is stale, ``fallback_field`` on the record
    itself is used instead.

    Args:
        id_field: Foreign id field on the record (e.g. ``account_type_id``)
        lookup: Related records keyed by id
        key_field: Attribute of the related record to group by (e.g. ``code``)
        fallback_field: Denormalized field on the record (e.g. ``account_type``)
    """

    def resolve(record: Record) -> Optional[Any]:
        foreign_id = record.get(id_field)
        if foreign_id is not None:
            related = lookup.get(foreign_id)
            if related is None:
                related = lookup.get(str(foreign_id))
            if related is not None and related.get(key_field):
                return related.get(key_field)
        if fallback_field is None:
            return None
        value = record.get(fallback_field)
        return value if value else None

    return resolve


def by_month(*date_fields: str) -> GroupKeyResolver:
    """Group by the ``YYYY-MM`` of the first parsable date field."""

    def resolve(record: Record) -> Optional[str]:
        for field in date_fields:
            if not record.get(field):
                continue
            instant = parse_instant(record.get(field))
            if instant is not None:
                return instant.strftime("%Y-%m")
            return None
        return None

    return resolve


def index_by(records: Iterable[Record], field: str = "id") -> dict[Any, Record]:
    """Index records by a field; later duplicates replace earlier ones."""
    return {record[field]: record for record in records if record.get(field) is not None}

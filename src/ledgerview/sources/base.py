"""Abstract record source interface."""

from abc import ABC, abstractmethod
from typing import Any

from ledgerview.domain.entities import Record
from ledgerview.domain.errors import NotFoundError, collection_not_found
from ledgerview.sources.envelope import normalize_records

ACCOUNTS = "accounts"
ACCOUNT_TYPES = "account_types"
PERSONNEL = "personnel"
ACTIVITY_LOGS = "activity_logs"
INVOICES = "invoices"
BILLS = "bills"
JOURNALS = "journals"
CASH_ACCOUNTS = "cash_accounts"


class RecordSource(ABC):
    """Supplies record collections fetched from the back-office API.

    Implementations return collections already normalized to a flat list of
    records, whatever envelope the API used.
    """

    @abstractmethod
    def has(self, collection: str) -> bool:
        """Return True if the collection can be fetched."""
        pass

    @abstractmethod
    def fetch_raw(self, collection: str) -> Any:
        """Return the undecoded response payload for a collection."""
        pass

    def fetch(self, collection: str) -> list[Record]:
        """Return a collection as a list of records."""
        return normalize_records(self.fetch_raw(collection))

    def fetch_optional(self, collection: str) -> list[Record]:
        """Return a collection, or an empty list when it is unavailable."""
        if not self.has(collection):
            return []
        return self.fetch(collection)


class InMemorySource(RecordSource):
    """Record source over payloads held in memory."""

    def __init__(self, payloads: dict[str, Any]):
        """Initialize in-memory source.

        Args:
            payloads: Response payloads keyed by collection name
        """
        self.payloads = payloads

    def has(self, collection: str) -> bool:
        return collection in self.payloads

    def fetch_raw(self, collection: str) -> Any:
        if collection not in self.payloads:
            raise NotFoundError(collection_not_found(collection, "memory"))
        return self.payloads[collection]

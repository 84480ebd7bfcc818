"""Record source backed by JSON snapshot files."""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from ledgerview.domain.errors import (
    NotFoundError,
    ValidationError,
    collection_not_found,
    malformed_collection,
)
from ledgerview.sources.base import RecordSource


class JSONSnapshotSource(RecordSource):
    """Reads ``<data_dir>/<collection>.json`` exports of API responses."""

    def __init__(self, data_dir: str | Path):
        """Initialize snapshot source.

        Args:
            data_dir: Directory holding one JSON file per collection
        """
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def has(self, collection: str) -> bool:
        return self.path_for(collection).is_file()

    def fetch_raw(self, collection: str) -> Any:
        """Decode a snapshot file.

        Raises:
            NotFoundError: If the snapshot file does not exist
            ValidationError: If the file is not valid UTF-8 JSON
        """
        path = self.path_for(collection)
        if not path.is_file():
            raise NotFoundError(collection_not_found(collection, str(self.data_dir)))

        with open(path, "r", encoding="utf-8-sig") as f:
            # UnicodeDecodeError and the int digit limit are ValueErrors too
            try:
                return json.load(f, parse_float=Decimal)
            except ValueError as e:
                raise ValidationError(malformed_collection(collection, str(e)))

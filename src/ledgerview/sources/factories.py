"""Record source factory functions."""

import os
from pathlib import Path
from typing import Optional

from ledgerview.sources.json_snapshot import JSONSnapshotSource


def create_snapshot_source(data_dir: Optional[str] = None) -> JSONSnapshotSource:
    """Create a JSON snapshot source.

    Args:
        data_dir: Snapshot directory. If None, checks LEDGERVIEW_DATA_DIR
            environment variable, then defaults to ~/.ledgerview

    Returns:
        JSONSnapshotSource reading from the resolved directory
    """
    if data_dir is None:
        data_dir = os.environ.get("LEDGERVIEW_DATA_DIR")

    if data_dir is None:
        data_dir = str(Path.home() / ".ledgerview")

    return JSONSnapshotSource(data_dir)

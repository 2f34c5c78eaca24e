"""
CSV report of installed versions.
"""

from __future__ import annotations

import csv
import logging
import os
from pathlib import Path
from typing import Sequence

from .detection import VersionRecord

logger = logging.getLogger(__name__)

# Default report file location
DEFAULT_REPORT_FILE = "dotnet_versions.csv"
HEADER = ("Name", "Version")


def get_report_path(default: str = DEFAULT_REPORT_FILE) -> Path:
    """Get report file path from env or default.

    Relative paths resolve against the current working directory.
    """
    report_file = os.environ.get("DOTNET_AUDIT_CSV", default)
    if os.path.isabs(report_file):
        return Path(report_file)
    return Path.cwd() / report_file


def write_csv(records: Sequence[VersionRecord], path: Path | str | None = None) -> int:
    """Write records to a CSV file with a Name,Version header.

    An empty record list leaves the file system untouched. An existing file
    at ``path`` is overwritten. Write errors propagate to the caller.

    Args:
        records: Records to write
        path: Target file (uses default if None)

    Returns:
        Number of data rows written
    """
    if not records:
        logger.info("Nothing to log: no .NET versions found")
        return 0

    if path is None:
        path = get_report_path()
    path = Path(path)

    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        writer.writerows(record.to_row() for record in records)

    logger.info(f"Wrote {len(records)} version(s) to {path}")
    return len(records)

"""
End-of-support reference data and classification.

The reference table is the single source of truth for .NET (Core) support
cutoffs. It is immutable once built; additional releases can be supplied
through configuration without touching the classifier.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .detection import VersionRecord


MAJOR_MINOR_RE = re.compile(r"^\d+\.\d+$")

# Framework support tracking is binary: only this release line is supported
SUPPORTED_FRAMEWORK_PREFIX = "4.8"

# Versions the table does not know about (and non-.NET names) are assumed supported
UNKNOWN_VERSION_IS_EOL = False


@dataclass(frozen=True)
class EosEntry:
    """
    End-of-support cutoff for one release line.

    Attributes:
        major_minor: Release identifier, "X.Y"
        end_of_support: Last supported day
    """
    major_minor: str
    end_of_support: datetime.date

    def __post_init__(self):
        if not MAJOR_MINOR_RE.match(self.major_minor):
            raise ValueError(f"Invalid release identifier: {self.major_minor!r}. Expected 'X.Y'")


BUILTIN_ENTRIES: tuple[EosEntry, ...] = (
    EosEntry("7.0", datetime.date(2024, 5, 14)),
    EosEntry("6.0", datetime.date(2024, 11, 12)),
    EosEntry("5.0", datetime.date(2022, 5, 10)),
    EosEntry("3.1", datetime.date(2022, 12, 13)),
    EosEntry("3.0", datetime.date(2020, 3, 3)),
    EosEntry("2.2", datetime.date(2019, 12, 23)),
    EosEntry("2.1", datetime.date(2021, 8, 21)),
    EosEntry("2.0", datetime.date(2018, 10, 1)),
    EosEntry("1.1", datetime.date(2019, 6, 27)),
    EosEntry("1.0", datetime.date(2019, 6, 27)),
)


def index_entries(entries: Iterable[EosEntry]) -> Mapping[str, EosEntry]:
    """Index entries by release identifier, rejecting duplicates."""
    table: dict[str, EosEntry] = {}
    for entry in entries:
        if entry.major_minor in table:
            raise ValueError(f"Duplicate end-of-support entry for {entry.major_minor}")
        table[entry.major_minor] = entry
    return MappingProxyType(table)


EOL_TABLE: Mapping[str, EosEntry] = index_entries(BUILTIN_ENTRIES)


def build_reference_table(extra: Mapping[str, str] | None = None) -> Mapping[str, EosEntry]:
    """
    Build a reference table from the built-in entries plus extra ones.

    Args:
        extra: Mapping of "X.Y" to ISO dates; these replace built-in entries

    Returns:
        Read-only mapping of release identifier to EosEntry

    Raises:
        ValueError: If a key or date is malformed
    """
    if not extra:
        return EOL_TABLE

    table = dict(EOL_TABLE)
    for major_minor, value in extra.items():
        try:
            cutoff = datetime.date.fromisoformat(str(value))
        except ValueError as e:
            raise ValueError(f"Invalid end-of-support date for {major_minor}: {value!r}") from e
        table[major_minor] = EosEntry(major_minor, cutoff)
    return MappingProxyType(table)


def _as_date(now: datetime.date | datetime.datetime) -> datetime.date:
    if isinstance(now, datetime.datetime):
        return now.date()
    return now


class EolClassifier:
    """Classifies version records against a fixed reference table."""

    def __init__(self, table: Mapping[str, EosEntry] | None = None):
        self._table = EOL_TABLE if table is None else table

    def lookup(self, version: str) -> EosEntry | None:
        """Find the entry matching the "major.minor" prefix of a version string."""
        parts = version.split(".")
        if len(parts) < 2:
            return None
        return self._table.get(f"{parts[0]}.{parts[1]}")

    def is_eol(self, record: VersionRecord, now: datetime.date | datetime.datetime) -> bool:
        """
        Decide whether a record is past end-of-support.

        Framework records are supported only on the 4.8 line. Core records are
        compared against the table by their major.minor prefix; versions with
        fewer than two components or unknown releases count as supported.
        """
        if record.name.startswith("Framework"):
            return not record.version.startswith(SUPPORTED_FRAMEWORK_PREFIX)

        if record.name.startswith("Core"):
            if len(record.version.split(".")) < 2:
                return False
            entry = self.lookup(record.version)
            if entry is None:
                return UNKNOWN_VERSION_IS_EOL
            return _as_date(now) > entry.end_of_support

        return UNKNOWN_VERSION_IS_EOL

    def filter_eol(
        self,
        records: Sequence[VersionRecord],
        now: datetime.date | datetime.datetime,
    ) -> list[VersionRecord]:
        """Return the end-of-support records, preserving input order."""
        return [record for record in records if self.is_eol(record, now)]


_default_classifier = EolClassifier()


def is_eol(record: VersionRecord, now: datetime.date | datetime.datetime) -> bool:
    """Classify with the built-in reference table."""
    return _default_classifier.is_eol(record, now)


def filter_eol(
    records: Sequence[VersionRecord],
    now: datetime.date | datetime.datetime,
) -> list[VersionRecord]:
    """Filter with the built-in reference table."""
    return _default_classifier.filter_eol(records, now)

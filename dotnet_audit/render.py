"""
Console rendering of scan results.
"""

from __future__ import annotations

import datetime
import os
import sys
from typing import Sequence, TextIO

from wcwidth import wcswidth

from .detection import VersionRecord
from .eol import EolClassifier


USE_COLOR = os.environ.get("DOTNET_AUDIT_COLOR", "1") == "1"

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"

EOL_MARKER = "[EOL]"


def colorize(text: str, color: str) -> str:
    """Apply color to text.

    Returns:
        Colored text or plain text if colors disabled
    """
    if not USE_COLOR or not text:
        return text
    return f"{color}{text}{RESET}"


def pad(text: str, width: int) -> str:
    """Left-align text to a display width."""
    text_width = wcswidth(text)
    if text_width < 0:
        text_width = len(text)
    return text + " " * max(0, width - text_width)


def render_records(
    records: Sequence[VersionRecord],
    classifier: EolClassifier,
    now: datetime.date | datetime.datetime,
    out: TextIO | None = None,
) -> int:
    """Print one line per record, marking end-of-support ones.

    Args:
        records: Records to print
        classifier: Classifier deciding the EOL marker
        now: Classification moment
        out: Output stream (stdout if None)

    Returns:
        Number of end-of-support records
    """
    out = out or sys.stdout
    if not records:
        print(colorize("No .NET versions found.", YELLOW), file=out)
        return 0

    width = max(max(wcswidth(r.name), len(r.name)) for r in records)
    eol_count = 0
    for record in records:
        line = f"{pad(record.name, width)}  {record.version}"
        if classifier.is_eol(record, now):
            eol_count += 1
            line = f"{line}  {colorize(EOL_MARKER, RED)}"
        print(line, file=out)

    print_summary(len(records), eol_count, out)
    return eol_count


def print_summary(total: int, eol_count: int, out: TextIO | None = None) -> None:
    """Print the summary line."""
    out = out or sys.stdout
    color = RED if eol_count else GREEN
    print(f"\n{total} versions, {colorize(f'{eol_count} end-of-support', color)}", file=out)

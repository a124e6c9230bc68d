"""Single-pass scanning of journal files.

The scanner walks a file top to bottom with one piece of state, the
active date. Date headings set it, time entry candidates are parsed under
it, and everything else is skipped. A candidate seen while no date is
active becomes an orphan warning.

Per-line problems are returned as ParseWarning values, so one bad line
never costs the rest of the file.
"""

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from pathlib import PurePath
from typing import Iterable, Optional

from timetracker.journal.classifier import DateHeading, TimeEntryCandidate, classify
from timetracker.journal.parser import ORPHAN_REASON, parse_entry
from timetracker.models.entry import (
    ParseWarning,
    ScanResult,
    SourceLocation,
    TimeEntry,
    WarningKind,
)
from timetracker.utils.logging import get_logger


logger = get_logger(__name__)

_FILENAME_DATE = re.compile(r"^(\d{4})[-_](\d{2})[-_](\d{2})")


@dataclass
class JournalFile:
    """Scanner state for one file. Lives only while that file is scanned.

    Attributes:
        source: File identity used in source locations
        active_date: Current date context (None until the first heading)
        records: Parsed entries in file order
        warnings: Skipped lines in file order
    """

    source: str
    active_date: Optional[date] = None
    records: list[TimeEntry] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)

    def feed(self, line: str, line_number: int) -> None:
        """Advance the state machine by one line."""
        kind = classify(line)

        if isinstance(kind, DateHeading):
            # Headings always override the current date
            self.active_date = kind.date
            logger.debug("date_heading", source=self.source, line=line_number, date=str(kind.date))
            return

        if not isinstance(kind, TimeEntryCandidate):
            return

        location = SourceLocation(self.source, line_number)

        if self.active_date is None:
            self.warnings.append(
                ParseWarning(
                    location=location,
                    text=kind.raw,
                    kind=WarningKind.ORPHAN_ENTRY,
                    reason=ORPHAN_REASON,
                )
            )
            return

        outcome = parse_entry(kind, self.active_date, location)
        if isinstance(outcome, ParseWarning):
            self.warnings.append(outcome)
        else:
            self.records.append(outcome)

    def result(self) -> ScanResult:
        return ScanResult(
            source=self.source,
            records=tuple(self.records),
            warnings=tuple(self.warnings),
        )


def scan_journal(text: str, source: str, default_date: Optional[date] = None) -> ScanResult:
    """Scan the text of one journal file.

    Args:
        text: Full file content
        source: File identity for source locations (usually the path)
        default_date: Date active before the first heading (None means
            entries before the first heading are orphans)

    Returns:
        Records and warnings, both in file order
    """
    journal = JournalFile(source=source, active_date=default_date)

    for line_number, line in enumerate(text.splitlines(), start=1):
        journal.feed(line, line_number)

    logger.debug(
        "journal_scanned",
        source=source,
        records=len(journal.records),
        warnings=len(journal.warnings),
    )
    return journal.result()


def date_from_filename(name: str) -> Optional[date]:
    """Read a date from a journal file name.

    Accepts ISO (``2025-01-15.md``) and Logseq (``2025_01_15.md``) names;
    anything after the date is ignored.

    Args:
        name: File name or path

    Returns:
        The date, or None if the name doesn't start with a valid date
    """
    match = _FILENAME_DATE.match(PurePath(name).name)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def scan_sources(
    sources: Iterable[tuple[str, str]],
    workers: int = 1,
    date_from_name: bool = False,
) -> list[ScanResult]:
    """Scan several journals, optionally in parallel.

    Each file gets its own JournalFile, so workers share no state. Results
    come back in input order no matter which worker finishes first.

    Args:
        sources: (file identity, text) pairs in discovery order
        workers: Number of threads (1 scans sequentially)
        date_from_name: Start each file at the date in its file name

    Returns:
        One ScanResult per source, in input order
    """

    def scan(source: tuple[str, str]) -> ScanResult:
        identity, text = source
        default_date = date_from_filename(identity) if date_from_name else None
        return scan_journal(text, identity, default_date=default_date)

    if workers <= 1:
        return [scan(source) for source in sources]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() yields in submission order
        return list(executor.map(scan, sources))

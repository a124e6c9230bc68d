"""Time entry records produced by the journal scanner.

All records are frozen dataclasses. The scanner creates them, the
aggregator derives new ones (with durations filled in) via
``dataclasses.replace``; nothing mutates a record in place.
"""

import re
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from enum import Enum
from typing import Optional


# A tag is "#name" at the start of the text or after whitespace
TAG_PATTERN = re.compile(r"(?:(?<=\s)|^)#(?P<name>[A-Za-z0-9_][A-Za-z0-9_/-]*)")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SourceLocation:
    """Where a record or warning came from.

    Attributes:
        path: File identity as supplied by discovery (usually a path string)
        line: 1-based line number within the file
    """

    path: str
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class TimeEntry:
    """One parsed activity record.

    Attributes:
        date: Date of the nearest preceding date heading
        start: Start time-of-day
        end: End time-of-day (None for open-ended entries)
        description: Text after the time tokens, tags included
        tags: Labels from ``#tag`` markers, without the sigil
        location: Source file and line (diagnostics only)
        duration: Filled in by the aggregator; None straight out of the parser
    """

    date: date
    start: time
    end: Optional[time]
    description: str
    tags: frozenset[str] = frozenset()
    location: Optional[SourceLocation] = field(default=None, compare=False)
    duration: Optional[timedelta] = None

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    @property
    def duration_minutes(self) -> int:
        """Duration in whole minutes (0 until the aggregator sets it)."""
        if self.duration is None:
            return 0
        return int(self.duration.total_seconds()) // 60

    @property
    def plain_description(self) -> str:
        """Description with tag tokens removed.

        A projection for display; ``description`` itself keeps the tags.

        Examples:
            >>> entry.description
            'Write report #work'
            >>> entry.plain_description
            'Write report'
        """
        return _WHITESPACE.sub(" ", TAG_PATTERN.sub("", self.description)).strip()


class WarningKind(Enum):
    """Why a time-entry-shaped line did not become a record."""

    MALFORMED_LINE = "malformed_line"
    ORPHAN_ENTRY = "orphan_entry"


@dataclass(frozen=True)
class ParseWarning:
    """A skipped line, kept as data so scanning never aborts.

    Attributes:
        location: Source file and line
        text: Raw line text
        kind: Warning category
        reason: Human-readable explanation
    """

    location: SourceLocation
    text: str
    kind: WarningKind
    reason: str

    def __str__(self) -> str:
        return f"{self.location}: {self.reason}: {self.text.strip()!r}"


@dataclass(frozen=True)
class ScanResult:
    """Records and warnings from scanning a single journal file."""

    source: str
    records: tuple[TimeEntry, ...] = ()
    warnings: tuple[ParseWarning, ...] = ()


@dataclass(frozen=True)
class AggregateResult:
    """Flattened, duration-enriched output of the aggregator."""

    entries: tuple[TimeEntry, ...] = ()
    warnings: tuple[ParseWarning, ...] = ()


@dataclass(frozen=True)
class TagTotal:
    """Accumulated time for one tag across all entries.

    Attributes:
        tag: Tag name ("" collects untagged entries)
        duration: Sum of entry durations
        entry_count: Number of entries carrying the tag
        sources: Distinct source files, in first-seen order
    """

    tag: str
    duration: timedelta
    entry_count: int
    sources: tuple[str, ...]

    @property
    def duration_minutes(self) -> int:
        return int(self.duration.total_seconds()) // 60

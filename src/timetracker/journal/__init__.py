"""Journal parsing: from Markdown text to ordered time entry records.

Pipeline:
- classify each line (date heading, time entry candidate, or ignorable)
- parse candidates under the active date into TimeEntry records
- scan whole files, keeping malformed lines as warnings
- aggregate files in discovery order and compute durations

Example:
    >>> from timetracker.journal import aggregate, scan_journal
    >>> result = scan_journal("# 2024-01-15\\n- 09:00-10:30 Write report #work", "day.md")
    >>> aggregate([result]).entries[0].duration_minutes
    90
"""

from timetracker.journal.aggregator import (
    accumulate_by_tag,
    aggregate,
    compute_duration,
    infer_open_ends,
)
from timetracker.journal.classifier import (
    IGNORABLE,
    DateHeading,
    Ignorable,
    TimeEntryCandidate,
    classify,
)
from timetracker.journal.parser import extract_tags, parse_entry, parse_time
from timetracker.journal.scanner import (
    JournalFile,
    date_from_filename,
    scan_journal,
    scan_sources,
)

__all__ = [
    "IGNORABLE",
    "DateHeading",
    "Ignorable",
    "JournalFile",
    "TimeEntryCandidate",
    "accumulate_by_tag",
    "aggregate",
    "classify",
    "compute_duration",
    "date_from_filename",
    "extract_tags",
    "infer_open_ends",
    "parse_entry",
    "parse_time",
    "scan_journal",
    "scan_sources",
]

"""Data models for timetracker."""

from timetracker.models.entry import (
    AggregateResult,
    ParseWarning,
    ScanResult,
    SourceLocation,
    TagTotal,
    TimeEntry,
    WarningKind,
)

__all__ = [
    "AggregateResult",
    "ParseWarning",
    "ScanResult",
    "SourceLocation",
    "TagTotal",
    "TimeEntry",
    "WarningKind",
]

"""Merging per-file scan results and deriving durations.

Policies:

- Order is discovery order of files, then line order within a file.
- An entry whose end is earlier than its start crosses midnight; its
  duration is measured to the end time on the next day.
- Open-ended entries (no end time) have zero duration. Closing them at the
  next entry's start is available as the separate ``infer_open_ends`` pass.
"""

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from timetracker.models.entry import AggregateResult, ScanResult, TagTotal, TimeEntry
from timetracker.utils.logging import get_logger


logger = get_logger(__name__)

_DAY = timedelta(days=1)


def compute_duration(start: time, end: Optional[time]) -> timedelta:
    """Duration between two times of day on the same date.

    Args:
        start: Start time
        end: End time, or None for an open-ended entry

    Returns:
        Non-negative duration; zero when end is None or equal to start

    Examples:
        >>> compute_duration(time(9, 0), time(10, 30))
        datetime.timedelta(seconds=5400)
        >>> compute_duration(time(23, 30), time(0, 15))
        datetime.timedelta(seconds=2700)
    """
    if end is None:
        return timedelta(0)
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    if delta < timedelta(0):
        delta += _DAY
    return delta


def with_duration(entry: TimeEntry) -> TimeEntry:
    """Return a copy of ``entry`` with its duration computed."""
    return replace(entry, duration=compute_duration(entry.start, entry.end))


def aggregate(results: Iterable[ScanResult]) -> AggregateResult:
    """Flatten per-file results into one ordered, duration-enriched sequence.

    Args:
        results: Scan results in discovery order

    Returns:
        All entries (with durations) and all warnings, in discovery order
        then file order
    """
    entries: list[TimeEntry] = []
    warnings = []
    files = 0

    for result in results:
        files += 1
        entries.extend(with_duration(record) for record in result.records)
        warnings.extend(result.warnings)

    logger.info("entries_aggregated", files=files, entries=len(entries), warnings=len(warnings))
    return AggregateResult(entries=tuple(entries), warnings=tuple(warnings))


def infer_open_ends(entries: Iterable[TimeEntry]) -> tuple[TimeEntry, ...]:
    """Close open-ended entries at the start of the entry that follows.

    Only applies when the next entry comes from the same file and has the
    same date; otherwise the entry stays open-ended. Durations are
    recomputed for the entries that change.

    Args:
        entries: Aggregated entries, in output order

    Returns:
        New sequence of entries, same length and order
    """
    entries = list(entries)
    closed = []

    for index, entry in enumerate(entries):
        following = entries[index + 1] if index + 1 < len(entries) else None
        if (
            entry.is_open_ended
            and following is not None
            and following.date == entry.date
            and _same_source(entry, following)
        ):
            entry = with_duration(replace(entry, end=following.start))
        closed.append(entry)

    return tuple(closed)


def accumulate_by_tag(entries: Iterable[TimeEntry]) -> list[TagTotal]:
    """Sum durations per tag.

    An entry with several tags counts toward each of them; untagged entries
    are collected under the empty tag.

    Args:
        entries: Aggregated entries

    Returns:
        One TagTotal per tag, sorted by tag name
    """
    durations: dict[str, timedelta] = {}
    counts: dict[str, int] = {}
    sources: dict[str, list[str]] = {}

    for entry in entries:
        duration = entry.duration if entry.duration is not None else compute_duration(entry.start, entry.end)
        for tag in entry.tags or {""}:
            durations[tag] = durations.get(tag, timedelta(0)) + duration
            counts[tag] = counts.get(tag, 0) + 1
            tag_sources = sources.setdefault(tag, [])
            if entry.location is not None and entry.location.path not in tag_sources:
                tag_sources.append(entry.location.path)

    return [
        TagTotal(
            tag=tag,
            duration=durations[tag],
            entry_count=counts[tag],
            sources=tuple(sources[tag]),
        )
        for tag in sorted(durations)
    ]


def _same_source(first: TimeEntry, second: TimeEntry) -> bool:
    if first.location is None or second.location is None:
        return first.location is second.location
    return first.location.path == second.location.path

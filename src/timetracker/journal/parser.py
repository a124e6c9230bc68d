"""Time entry parsing.

Turns a classified time entry candidate into a TimeEntry, or into a
ParseWarning when the line cannot be used. Parsing never raises for bad
input; the caller decides what to do with warnings.

Entry syntax (after the bullet and optional checkbox)::

    HH:MM[ - HH:MM] description with #tags

The range separator is ``-`` or ``–`` with optional spaces. A separator
that is not followed by a digit is read as punctuation, so
``14:00 - Call client`` is an open-ended entry described as "Call client".
"""

import re
from datetime import date, time
from typing import Optional, Union

from timetracker.journal.classifier import TimeEntryCandidate
from timetracker.models.entry import (
    TAG_PATTERN,
    ParseWarning,
    SourceLocation,
    TimeEntry,
    WarningKind,
)


# A digit run after the separator is always the end token; parse_time
# decides whether it is a valid time
TIME_RANGE_PATTERN = re.compile(
    r"(?P<start>\d{1,2}:\d{2})(?:\s*[-–]\s*(?P<end>\d[\d:]*\w*))?"
)

# Punctuation and markup separating the times from the description
_LEADING_MARKUP = re.compile(r"^[\s\-–—:|*,;.]+")

ORPHAN_REASON = "entry before any date heading"


def parse_time(token: str) -> Optional[time]:
    """Parse an ``H:MM``/``HH:MM`` token into a time-of-day.

    Args:
        token: Time token such as "09:30"

    Returns:
        The time, or None if the token is not a valid 24-hour time

    Examples:
        >>> parse_time("9:05")
        datetime.time(9, 5)
        >>> parse_time("25:99") is None
        True
    """
    hours, sep, minutes = token.partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit() or len(minutes) != 2:
        return None
    h, m = int(hours), int(minutes)
    if not (0 <= h <= 23 and 0 <= m <= 59):
        return None
    return time(h, m)


def extract_tags(description: str) -> frozenset[str]:
    """Collect ``#tag`` labels from a description.

    The description is left untouched; tags are a separate projection.

    Args:
        description: Entry description

    Returns:
        Tag names without the leading ``#``

    Examples:
        >>> sorted(extract_tags("Write report #work #client-a"))
        ['client-a', 'work']
        >>> extract_tags("C# is not a tag")
        frozenset()
    """
    return frozenset(m.group("name") for m in TAG_PATTERN.finditer(description))


def parse_entry(
    candidate: TimeEntryCandidate,
    active_date: Optional[date],
    location: SourceLocation,
) -> Union[TimeEntry, ParseWarning]:
    """Parse a time entry candidate under the current date.

    Args:
        candidate: Line classified as a time entry candidate
        active_date: Date of the nearest preceding heading (None if none seen)
        location: Where the line came from

    Returns:
        A TimeEntry without duration, or a ParseWarning explaining why the
        line was skipped
    """

    def warn(kind: WarningKind, reason: str) -> ParseWarning:
        return ParseWarning(location=location, text=candidate.raw, kind=kind, reason=reason)

    if active_date is None:
        return warn(WarningKind.ORPHAN_ENTRY, ORPHAN_REASON)

    match = TIME_RANGE_PATTERN.match(candidate.body)
    if match is None:
        return warn(WarningKind.MALFORMED_LINE, "missing start time")

    start = parse_time(match.group("start"))
    if start is None:
        return warn(WarningKind.MALFORMED_LINE, f"invalid start time {match.group('start')!r}")

    end = None
    if match.group("end") is not None:
        end = parse_time(match.group("end"))
        if end is None:
            return warn(WarningKind.MALFORMED_LINE, f"invalid end time {match.group('end')!r}")

    description = _LEADING_MARKUP.sub("", candidate.body[match.end():]).rstrip()

    return TimeEntry(
        date=active_date,
        start=start,
        end=end,
        description=description,
        tags=extract_tags(description),
        location=location,
    )

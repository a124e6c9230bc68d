"""Line classification for Markdown journals.

Each line of a journal is one of three things:

- a date heading, which sets the date for the entries below it::

    # 2024-01-15
    ## 2024/01/15 Monday

- a time entry candidate, a bullet starting with a time token::

    - 09:00-10:30 Write report #work
    * [x] 14:00 Call client

- anything else, which is ignored.

Classification is purely syntactic and never fails. Whether a candidate's
times are actually valid is decided later by the entry parser.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Union


# 1-6 hash marks, then YYYY-MM-DD, YYYY/MM/DD or YYYY.MM.DD (same separator
# twice), then end of line or whitespace
DATE_HEADING_PATTERN = re.compile(
    r"^\s*#{1,6}\s+(?P<year>\d{4})(?P<sep>[-/.])(?P<month>\d{2})(?P=sep)(?P<day>\d{2})(?=\s|$)"
)

# Bullet, optional task checkbox, then a time-shaped token
TIME_ENTRY_PATTERN = re.compile(
    r"^\s*[-*+]\s+(?:\[[ xX]\]\s+)?(?P<body>\d{1,2}:\d{2}(?=\s|$|[-–:|,;]).*)$"
)


@dataclass(frozen=True)
class DateHeading:
    """A heading that starts a new dated section."""

    date: date


@dataclass(frozen=True)
class TimeEntryCandidate:
    """A bullet that looks like a time entry.

    Attributes:
        raw: The full line as it appeared in the file
        body: The line from the first time token onward
    """

    raw: str
    body: str


@dataclass(frozen=True)
class Ignorable:
    """Prose, blank lines, unrelated headings and ordinary bullets."""


IGNORABLE = Ignorable()

LineKind = Union[DateHeading, TimeEntryCandidate, Ignorable]


def classify(line: str) -> LineKind:
    """Classify a single line of journal text.

    Args:
        line: One line, with or without its trailing newline

    Returns:
        DateHeading, TimeEntryCandidate, or IGNORABLE

    Examples:
        >>> classify("# 2024-01-15")
        DateHeading(date=datetime.date(2024, 1, 15))
        >>> classify("# 2024-13-45")
        Ignorable()
        >>> classify("- 09:00-10:30 Write report").body
        '09:00-10:30 Write report'
    """
    line = line.rstrip("\r\n")

    if match := DATE_HEADING_PATTERN.match(line):
        try:
            heading_date = date(
                int(match.group("year")),
                int(match.group("month")),
                int(match.group("day")),
            )
        except ValueError:
            # Heading-shaped but not a real date: just another heading
            return IGNORABLE
        return DateHeading(heading_date)

    if match := TIME_ENTRY_PATTERN.match(line):
        return TimeEntryCandidate(raw=line, body=match.group("body"))

    return IGNORABLE

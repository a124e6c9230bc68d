"""CSV output for time entries and tag totals.

Column order and headers are a stable contract for downstream tools:

    date,start,end,duration_minutes,description,tags[,file,line]

and, for accumulated output:

    tag,duration_minutes,entries,files
"""

import csv
from pathlib import PurePath
from typing import Iterable, TextIO

from timetracker.models.entry import TagTotal, TimeEntry


ENTRY_COLUMNS = ["date", "start", "end", "duration_minutes", "description", "tags"]
SOURCE_COLUMNS = ["file", "line"]
TAG_TOTAL_COLUMNS = ["tag", "duration_minutes", "entries", "files"]

TIME_FORMAT = "%H:%M"


def _display_path(path: str, basename: bool) -> str:
    return PurePath(path).name if basename else path


def entry_row(
    entry: TimeEntry,
    strip_tags: bool = False,
    include_source: bool = False,
    basename: bool = False,
    tag_delimiter: str = ",",
) -> list[str]:
    """Convert one entry into CSV fields.

    Args:
        entry: Aggregated time entry
        strip_tags: Use the description without #tag tokens
        include_source: Append file and line fields
        basename: Show only the file name in the file field
        tag_delimiter: Separator between tags

    Returns:
        Field values in column order
    """
    row = [
        entry.date.isoformat(),
        entry.start.strftime(TIME_FORMAT),
        entry.end.strftime(TIME_FORMAT) if entry.end is not None else "",
        str(entry.duration_minutes),
        entry.plain_description if strip_tags else entry.description,
        tag_delimiter.join(sorted(entry.tags)),
    ]
    if include_source:
        if entry.location is not None:
            row += [_display_path(entry.location.path, basename), str(entry.location.line)]
        else:
            row += ["", ""]
    return row


def write_entries(
    entries: Iterable[TimeEntry],
    stream: TextIO,
    *,
    strip_tags: bool = False,
    include_source: bool = False,
    basename: bool = False,
    tag_delimiter: str = ",",
) -> int:
    """Write entries as CSV with a header row.

    Args:
        entries: Aggregated entries, already in output order
        stream: Text stream to write to (opened with newline="")
        strip_tags: Use descriptions without #tag tokens
        include_source: Append file and line columns
        basename: Show only file names in the file column
        tag_delimiter: Separator between tags

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(ENTRY_COLUMNS + SOURCE_COLUMNS if include_source else ENTRY_COLUMNS)

    rows = 0
    for entry in entries:
        writer.writerow(
            entry_row(
                entry,
                strip_tags=strip_tags,
                include_source=include_source,
                basename=basename,
                tag_delimiter=tag_delimiter,
            )
        )
        rows += 1
    return rows


def write_tag_totals(totals: Iterable[TagTotal], stream: TextIO, *, basename: bool = False) -> int:
    """Write accumulated tag totals as CSV with a header row.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(TAG_TOTAL_COLUMNS)

    rows = 0
    for total in totals:
        writer.writerow([
            total.tag,
            str(total.duration_minutes),
            str(total.entry_count),
            ",".join(_display_path(source, basename) for source in total.sources),
        ])
        rows += 1
    return rows

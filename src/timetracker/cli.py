"""CLI entry point for timetracker."""

import sys
from pathlib import Path
from typing import Optional, Sequence

import click
from rich.console import Console

from timetracker import __version__
from timetracker.config import load_config
from timetracker.journal.aggregator import accumulate_by_tag, aggregate, infer_open_ends
from timetracker.journal.scanner import scan_sources
from timetracker.models.config import Config
from timetracker.models.entry import AggregateResult, ParseWarning
from timetracker.services.csv_writer import write_entries, write_tag_totals
from timetracker.services.discovery import discover_journal_files, read_journal_files
from timetracker.services.exceptions import ConfigError
from timetracker.utils.logging import LEVELS, close_log_file, configure_logging, get_logger


logger = get_logger(__name__)
console = Console(stderr=True)


def collect_entries(
    directories: Sequence[Path],
    recursive: bool = False,
    extensions: Sequence[str] = (".md",),
    workers: int = 1,
    date_from_name: bool = False,
    infer_end: bool = False,
) -> AggregateResult:
    """
    Discover, read, scan and aggregate journals.

    Args:
        directories: Directories to search, in order
        recursive: Also search subdirectories
        extensions: Journal file suffixes
        workers: Number of files scanned concurrently
        date_from_name: Start each file at the date in its file name
        infer_end: Close open-ended entries at the next entry's start

    Returns:
        Aggregated entries and warnings in discovery order
    """
    paths = discover_journal_files(directories, recursive=recursive, extensions=extensions)
    sources = read_journal_files(paths)

    results = scan_sources(
        ((source.identity, source.text) for source in sources),
        workers=workers,
        date_from_name=date_from_name,
    )
    result = aggregate(results)

    if infer_end:
        result = AggregateResult(entries=infer_open_ends(result.entries), warnings=result.warnings)

    return result


def report_warnings(warnings: Sequence[ParseWarning], quiet: bool = False) -> None:
    """
    Log every skipped line and print a short summary on stderr.

    Args:
        warnings: Warnings from the scan
        quiet: Skip the summary line (details still go to the log)
    """
    for warning in warnings:
        logger.warning(
            "entry_skipped",
            location=str(warning.location),
            kind=warning.kind.value,
            reason=warning.reason,
            text=warning.text.strip(),
        )

    if warnings and not quiet:
        noun = "line" if len(warnings) == 1 else "lines"
        console.print(f"[yellow]Skipped {len(warnings)} time entry {noun}[/yellow]")


def _load_config(config_path: Optional[Path]) -> Config:
    try:
        return load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@click.option(
    "-d",
    "--dir",
    "directories",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to search (repeatable; default: journal.directories from config)",
)
@click.option("-r", "--recursive", is_flag=True, help="Recurse into subdirectories")
@click.option(
    "-v",
    "--verbosity",
    type=click.Choice(list(LEVELS)),
    default=None,
    help="Set log verbosity level",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output CSV file (default: stdout)",
)
@click.option("--basename", is_flag=True, help="Print only the basename of file paths")
@click.option(
    "-a",
    "--accumulate",
    is_flag=True,
    help="Accumulate durations per tag instead of listing entries",
)
@click.option("--strip-tags", is_flag=True, help="Write descriptions without #tags")
@click.option(
    "--source",
    "include_source",
    is_flag=True,
    help="Add file and line columns",
)
@click.option(
    "--infer-end",
    is_flag=True,
    help="End open-ended entries at the next entry's start (same file and date)",
)
@click.option(
    "--date-from-filename",
    is_flag=True,
    help="Use a date in the file name (YYYY-MM-DD or YYYY_MM_DD) before the first heading",
)
@click.option("-j", "--jobs", type=click.IntRange(1, 64), default=None, help="Files scanned concurrently")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: ~/.config/timetracker/config.yaml)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append JSON log lines to this file instead of stderr",
)
@click.option("--strict", is_flag=True, help="Exit with status 2 if any line was skipped")
@click.version_option(__version__, prog_name="timetracker")
@click.pass_context
def cli(
    ctx: click.Context,
    directories: tuple[Path, ...],
    recursive: bool,
    verbosity: Optional[str],
    output: Optional[Path],
    basename: bool,
    accumulate: bool,
    strip_tags: bool,
    include_source: bool,
    infer_end: bool,
    date_from_filename: bool,
    jobs: Optional[int],
    config_path: Optional[Path],
    log_file: Optional[Path],
    strict: bool,
):
    """Parse Markdown journals for time tracking entries and write CSV.

    Journals are Markdown files with date headings and time entry bullets:

    \b
        # 2024-01-15
        - 09:00-10:30 Write report #work
        - 14:00 Call client #work
    """
    # Console logging until the config file has been read, then the final
    # level and destination
    configure_logging(verbosity or "warn")
    config = _load_config(config_path)

    level = verbosity or config.log_level
    configure_logging(level, log_file)
    ctx.call_on_close(close_log_file)

    # Command line values win over the config file; flags can only switch features on
    if directories:
        search_dirs = list(directories)
    else:
        search_dirs = [Path(d) for d in config.journal.directories]
    if not search_dirs:
        raise click.UsageError(
            "No journal directories given. Use -d/--dir or set journal.directories in the config file."
        )

    result = collect_entries(
        search_dirs,
        recursive=recursive or config.journal.recursive,
        extensions=config.journal.extensions,
        workers=jobs or config.scan.workers,
        date_from_name=date_from_filename or config.journal.date_from_filename,
        infer_end=infer_end or config.scan.infer_end,
    )

    report_warnings(result.warnings, quiet=level == "error")

    use_basename = basename or config.output.basename
    stream = output.open("w", newline="", encoding="utf-8") if output else sys.stdout
    try:
        if accumulate:
            rows = write_tag_totals(accumulate_by_tag(result.entries), stream, basename=use_basename)
        else:
            rows = write_entries(
                result.entries,
                stream,
                strip_tags=strip_tags or config.output.strip_tags,
                include_source=include_source or config.output.include_source,
                basename=use_basename,
                tag_delimiter=config.output.tag_delimiter,
            )
    finally:
        if output:
            stream.close()
        else:
            stream.flush()

    logger.info("csv_written", rows=rows, output=str(output) if output else "stdout")

    if strict and result.warnings:
        ctx.exit(2)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()

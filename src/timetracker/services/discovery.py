"""Journal file discovery and reading.

Discovery order is part of the output contract: directories are visited
in the order given and files within each directory tree are sorted by
path, so the same inputs always produce the same CSV.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from timetracker.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class JournalSource:
    """A journal file and its text."""

    path: Path
    text: str

    @property
    def identity(self) -> str:
        return str(self.path)


def discover_journal_files(
    directories: Iterable[Path],
    recursive: bool = False,
    extensions: Sequence[str] = (".md",),
) -> list[Path]:
    """
    Find journal files under the given directories.

    Args:
        directories: Directories to search, in priority order
        recursive: Also search subdirectories
        extensions: Accepted file suffixes (compared case-insensitively)

    Returns:
        Journal file paths in discovery order, without duplicates
    """
    suffixes = {ext.lower() for ext in extensions}
    found: list[Path] = []
    seen: set[Path] = set()

    for directory in directories:
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            logger.warning("directory_not_found", path=str(directory))
            continue

        candidates = directory.rglob("*") if recursive else directory.iterdir()
        files = sorted(
            path for path in candidates
            if path.is_file() and path.suffix.lower() in suffixes
        )

        for path in files:
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(path)

        logger.debug("directory_searched", path=str(directory), recursive=recursive, files=len(files))

    logger.info("journals_discovered", count=len(found))
    return found


def read_journal_files(paths: Iterable[Path]) -> list[JournalSource]:
    """
    Read journal files as UTF-8 text.

    Files that cannot be read are logged and left out; the rest of the run
    carries on with whatever could be read.

    Args:
        paths: Journal files in discovery order

    Returns:
        Readable journals, in the same order
    """
    sources = []

    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("journal_unreadable", path=str(path), error=str(e))
            continue
        sources.append(JournalSource(path=path, text=text))

    return sources
